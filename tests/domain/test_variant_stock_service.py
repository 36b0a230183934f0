"""Unit tests for VariantStockService (reservation and batch validation)."""

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from stockroom.domain.exceptions import (
    InsufficientStockError,
    InvalidIdError,
    ProductNotFoundError,
    ValidationError,
)
from stockroom.domain.model.product import Product
from stockroom.domain.model.stock import StockRequest, VariantStock
from stockroom.domain.model.value_objects import Money
from stockroom.domain.model.variant import ProductVariant, VariantItem
from stockroom.domain.service.variant_stock_service import VariantStockService
from tests.fakes import FakeProductRepository


def _setup(variant_stock=None):
    product = Product.create(
        name="Desk Lamp",
        base_price=Money.of("100"),
        variants=[
            ProductVariant("t-color", "Color", (VariantItem("red", "Red"), VariantItem("blue", "Blue"))),
        ],
        variant_stock=variant_stock if variant_stock is not None else [
            VariantStock("red", 2),
            VariantStock("blue", 5),
        ],
    )
    repo = FakeProductRepository([product])
    return VariantStockService(repo), repo, product.id


# ── Lookup ───────────────────────────────────────────────────────────────────


class TestGetVariantStock:

    def test_tracked(self):
        service, _, pid = _setup()
        assert service.get_variant_stock(pid, ["blue"]) == 5

    def test_untracked_is_zero(self):
        service, _, pid = _setup([VariantStock("red", 2)])
        assert service.get_variant_stock(pid, ["blue"]) == 0

    def test_unknown_product(self):
        service, _, _ = _setup()
        with pytest.raises(ProductNotFoundError):
            service.get_variant_stock("f" * 24, ["red"])


# ── Reservation ──────────────────────────────────────────────────────────────


class TestReduceVariantStock:

    def test_success_decrements(self):
        service, repo, pid = _setup()
        service.reduce_variant_stock(pid, ["blue"], 3)
        assert repo.get_by_id(pid).stock_for(["blue"]) == 2

    def test_exact_stock_goes_to_zero(self):
        service, repo, pid = _setup()
        service.reduce_variant_stock(pid, ["red"], 2)
        assert repo.get_by_id(pid).stock_for(["red"]) == 0

    def test_insufficient_carries_counts_and_leaves_stock(self):
        service, repo, pid = _setup()
        with pytest.raises(InsufficientStockError) as exc_info:
            service.reduce_variant_stock(pid, ["red"], 3)
        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert exc_info.value.variant_key == "red"
        assert exc_info.value.details["available"] == 2
        assert repo.get_by_id(pid).stock_for(["red"]) == 2

    def test_product_not_found(self):
        service, _, _ = _setup()
        with pytest.raises(ProductNotFoundError) as exc_info:
            service.reduce_variant_stock("f" * 24, ["red"], 1)
        assert exc_info.value.code == "PRODUCT_NOT_FOUND"

    def test_malformed_id(self):
        service, _, _ = _setup()
        with pytest.raises(InvalidIdError):
            service.reduce_variant_stock("not an id", ["red"], 1)

    def test_untracked_combination_succeeds_without_change(self, caplog):
        service, repo, pid = _setup([VariantStock("red", 2)])
        with caplog.at_level(logging.WARNING):
            service.reduce_variant_stock(pid, ["blue"], 50)
        assert "No stock tracking" in caplog.text
        assert repo.get_by_id(pid).variant_stock == [VariantStock("red", 2)]

    def test_untracked_product_succeeds(self):
        service, _, pid = _setup([])
        service.reduce_variant_stock(pid, ["red"], 1000)

    def test_non_positive_quantity_rejected(self):
        service, repo, pid = _setup()
        with pytest.raises(ValidationError) as exc_info:
            service.reduce_variant_stock(pid, ["red"], 0)
        assert exc_info.value.code == "INVALID_QUANTITY"
        assert repo.decrement_calls == 0


class TestConcurrentReservation:

    def test_no_oversell_under_contention(self):
        stock, attempts = 10, 40
        service, repo, pid = _setup([VariantStock("red", stock)])

        def reserve(_):
            try:
                service.reduce_variant_stock(pid, ["red"], 1)
                return True
            except InsufficientStockError:
                return False

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(reserve, range(attempts)))

        assert results.count(True) == stock
        assert results.count(False) == attempts - stock
        assert repo.get_by_id(pid).stock_for(["red"]) == 0


# ── Batch validation ─────────────────────────────────────────────────────────


class TestValidateStockAvailability:

    def test_all_available(self):
        service, _, pid = _setup()
        result = service.validate_stock_availability(
            [StockRequest(pid, ("red",), 2), StockRequest(pid, ("blue",), 5)]
        )
        assert result.available
        assert result.insufficient_items == []

    def test_only_short_line_reported(self):
        service, _, pid = _setup()
        result = service.validate_stock_availability(
            [StockRequest(pid, ("blue",), 1), StockRequest(pid, ("red",), 3)]
        )
        assert not result.available
        assert len(result.insufficient_items) == 1
        short = result.insufficient_items[0]
        assert (short.product_id, short.variant_key, short.requested, short.available) == (
            pid, "red", 3, 2,
        )

    def test_untracked_combination_never_short(self):
        service, _, pid = _setup([VariantStock("red", 0)])
        result = service.validate_stock_availability([StockRequest(pid, ("blue",), 99)])
        assert result.available

    def test_missing_product_is_short_with_nothing_available(self, caplog):
        service, _, _ = _setup()
        with caplog.at_level(logging.ERROR):
            result = service.validate_stock_availability([StockRequest("e" * 24, ("red",), 1)])
        assert not result.available
        assert result.insufficient_items[0].available == 0
        assert "Error validating stock" in caplog.text

    def test_lookup_error_is_short_and_other_lines_checked(self):
        service, repo, pid = _setup()

        class _Unreachable(FakeProductRepository):
            def get_by_id(self, product_id):
                if product_id == "c" * 24:
                    raise ConnectionError("datastore unreachable")
                return super().get_by_id(product_id)

        flaky = _Unreachable([repo.get_by_id(pid)])
        result = VariantStockService(flaky).validate_stock_availability(
            [StockRequest("c" * 24, ("red",), 1), StockRequest(pid, ("red",), 3)]
        )
        assert [(i.product_id, i.available) for i in result.insufficient_items] == [
            ("c" * 24, 0),
            (pid, 2),
        ]

    def test_malformed_id_is_short(self):
        service, _, _ = _setup()
        result = service.validate_stock_availability([StockRequest("bad id", (), 1)])
        assert result.insufficient_items[0].variant_key == "default"

    def test_does_not_reserve(self):
        service, repo, pid = _setup()
        service.validate_stock_availability([StockRequest(pid, ("red",), 1)])
        assert repo.decrement_calls == 0
        assert repo.get_by_id(pid).stock_for(["red"]) == 2
