"""End-to-end tests for the click CLI, wired to in-memory repositories."""

import json

import pytest
from click.testing import CliRunner

from stockroom.domain.service.variant_stock_service import VariantStockService
from stockroom.infrastructure.cli import (
    cart_commands,
    order_commands,
    product_commands,
    stock_commands,
    variant_type_commands,
    wishlist_commands,
)
from stockroom.infrastructure.cli.main import cli
from tests.fakes import (
    FakeCartRepository,
    FakeOrderRepository,
    FakeProductRepository,
    FakeVariantTypeRepository,
    FakeWishlistRepository,
)

PRODUCT = {
    "name": "Desk Lamp",
    "basePrice": 120,
    "offerPercentage": 25,
    "variants": [
        {
            "variantTypeId": "t-color",
            "variantTypeName": "Color",
            "selectedItems": [{"id": "red", "name": "Red"}, {"id": "blue", "name": "Blue"}],
        }
    ],
    "variantStock": [
        {"variantCombinationKey": "red", "stockCount": 2},
        {"variantCombinationKey": "blue", "stockCount": 0},
    ],
}


@pytest.fixture
def repos(monkeypatch):
    products = FakeProductRepository()
    carts = FakeCartRepository()
    orders = FakeOrderRepository()
    wishlists = FakeWishlistRepository()
    variant_types = FakeVariantTypeRepository()

    for module in (product_commands, stock_commands, cart_commands, order_commands, wishlist_commands):
        monkeypatch.setattr(module, "product_repository", lambda: products)
    for module in (stock_commands, cart_commands, order_commands):
        monkeypatch.setattr(module, "cart_repository", lambda: carts)
    for module in (stock_commands, order_commands):
        monkeypatch.setattr(module, "stock_service", lambda: VariantStockService(products))
    monkeypatch.setattr(order_commands, "order_repository", lambda: orders)
    monkeypatch.setattr(wishlist_commands, "wishlist_repository", lambda: wishlists)
    monkeypatch.setattr(variant_type_commands, "variant_type_repository", lambda: variant_types)

    return {"products": products, "carts": carts, "orders": orders}


def _create_product(runner) -> str:
    result = runner.invoke(cli, ["product", "create", "-"], input=json.dumps(PRODUCT))
    assert result.exit_code == 0, result.output
    return result.output.split()[1]


# ── Products and stock ───────────────────────────────────────────────────────


class TestProductCommands:

    def test_create_and_show(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)

        result = runner.invoke(cli, ["product", "show", product_id])
        assert result.exit_code == 0
        assert "Desk Lamp" in result.output
        assert "90.00 AED" in result.output
        assert "PARTIAL_STOCK_OUT" in result.output

    def test_create_with_invalid_payload_lists_fields(self, repos):
        result = CliRunner().invoke(
            cli, ["product", "create", "-"], input=json.dumps({"name": "", "basePrice": -5})
        )
        assert result.exit_code == 1
        assert "VALIDATION_ERROR" in result.output
        assert "basePrice" in result.output

    def test_create_with_bad_json(self, repos):
        result = CliRunner().invoke(cli, ["product", "create", "-"], input="{nope")
        assert result.exit_code == 2
        assert "Invalid JSON" in result.output

    def test_show_unknown(self, repos):
        result = CliRunner().invoke(cli, ["product", "show", "a" * 24])
        assert result.exit_code == 1
        assert "PRODUCT_NOT_FOUND" in result.output

    def test_list(self, repos):
        runner = CliRunner()
        _create_product(runner)
        result = runner.invoke(cli, ["product", "list"])
        assert result.exit_code == 0
        assert "Desk Lamp" in result.output
        assert "Page 1/1  (1 products)" in result.output

    def test_delete(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)
        result = runner.invoke(cli, ["product", "delete", product_id])
        assert result.exit_code == 0
        assert repos["products"].get_by_id(product_id) is None


class TestStockCommands:

    def test_set_and_show(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)

        result = runner.invoke(cli, ["stock", "set", product_id, "--items", "blue", "--count", "7"])
        assert result.exit_code == 0, result.output
        assert "'blue' set to 7" in result.output

        result = runner.invoke(cli, ["stock", "show", product_id])
        assert result.exit_code == 0
        assert "Color: Blue" in result.output
        assert "IN_STOCK" in result.output

    def test_set_unknown_combination(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)
        result = runner.invoke(cli, ["stock", "set", product_id, "--items", "green", "--count", "1"])
        assert result.exit_code == 1
        assert "INVALID_VARIANT_COMBINATION" in result.output


# ── Storefront ───────────────────────────────────────────────────────────────


class TestStorefrontCommands:

    def test_cart_add_show_and_validate(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)

        result = runner.invoke(
            cli, ["cart", "add", "--session", "s1", "--product", product_id, "--items", "red", "--qty", "2"]
        )
        assert result.exit_code == 0, result.output
        assert "180.00 AED" in result.output

        result = runner.invoke(cli, ["cart", "validate", "--session", "s1"])
        assert result.exit_code == 0
        assert "All items are available." in result.output

        repos["products"].decrement_stock(product_id, "red", 1)
        result = runner.invoke(cli, ["stock", "validate", "--session", "s1"])
        assert result.exit_code == 1
        assert "requested 2, available 1" in result.output

    def test_cart_add_beyond_stock(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)
        result = runner.invoke(
            cli, ["cart", "add", "--session", "s1", "--product", product_id, "--items", "red", "--qty", "3"]
        )
        assert result.exit_code == 1
        assert "INSUFFICIENT_STOCK" in result.output

    def test_checkout_to_order(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)
        runner.invoke(
            cli, ["cart", "add", "--session", "s1", "--product", product_id, "--items", "red", "--qty", "2"]
        )

        result = runner.invoke(
            cli, ["order", "complete-checkout", "--payment-session", "cs_1", "--session", "s1"]
        )
        assert result.exit_code == 0, result.output
        assert "status=paid" in result.output
        assert "Color: Red" in result.output
        assert repos["products"].get_by_id(product_id).stock_for(["red"]) == 0

        order_id = repos["orders"].get_by_payment_session_id("cs_1").id
        result = runner.invoke(cli, ["order", "set-status", order_id, "completed"])
        assert result.exit_code == 0
        assert "is now completed" in result.output

        result = runner.invoke(cli, ["order", "list", "--session", "s1"])
        assert order_id in result.output

    def test_wishlist(self, repos):
        runner = CliRunner()
        product_id = _create_product(runner)
        result = runner.invoke(
            cli, ["wishlist", "add", "--session", "s1", "--product", product_id, "--items", "red"]
        )
        assert result.exit_code == 0
        result = runner.invoke(cli, ["wishlist", "show", "--session", "s1"])
        assert product_id in result.output


class TestVariantTypeCommands:

    def test_create_and_list(self, repos):
        runner = CliRunner()
        result = runner.invoke(cli, ["variant-type", "create", "Color", "--item", "Red", "--item", "Blue"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["variant-type", "create", "color", "--item", "Green"])
        assert result.exit_code == 1
        assert "VARIANT_TYPE_EXISTS" in result.output

        result = runner.invoke(cli, ["variant-type", "list"])
        assert "Red" in result.output and "Blue" in result.output
