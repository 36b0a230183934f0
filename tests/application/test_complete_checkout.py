"""Integration tests for checkout completion and the order use cases."""

import logging

import pytest
from pymongo.errors import AutoReconnect

from stockroom.application.complete_checkout import CompleteCheckoutHandler
from stockroom.application.show_order import (
    ListOrdersHandler,
    ShowOrderHandler,
    UpdateOrderStatusHandler,
)
from stockroom.domain.exceptions import EntityNotFoundError, ValidationError
from stockroom.domain.model.cart import Cart, CartLineItem
from stockroom.domain.model.order import OrderStatus
from stockroom.domain.model.product import Product, ProductImage
from stockroom.domain.model.stock import VariantStock
from stockroom.domain.model.value_objects import Money
from stockroom.domain.model.variant import ProductVariant, VariantItem
from stockroom.domain.service.variant_stock_service import VariantStockService
from tests.fakes import FakeCartRepository, FakeOrderRepository, FakeProductRepository


def _setup(red_stock=5, product_repo_cls=FakeProductRepository):
    lamp = Product.create(
        name="Desk Lamp",
        base_price=Money.of("100"),
        variants=[
            ProductVariant("t-color", "Color", (VariantItem("red", "Red"), VariantItem("blue", "Blue"))),
        ],
        variant_stock=[VariantStock("red", red_stock)],
        images=[ProductImage("img-1", "/red.jpg", ("red",))],
    )
    cable = Product.create(name="Cable", base_price=Money.of("5"))
    product_repo = product_repo_cls([lamp, cable])

    cart = Cart(id=None, session_id="sess-1")
    cart.add_item(CartLineItem(lamp.id, ("red",), 2, Money.of("100")))
    cart.add_item(CartLineItem(cable.id, (), 3, Money.of("5")))
    cart_repo = FakeCartRepository([cart])

    order_repo = FakeOrderRepository()
    handler = CompleteCheckoutHandler(
        order_repo=order_repo,
        cart_repo=cart_repo,
        product_repo=product_repo,
        stock_service=VariantStockService(product_repo),
    )
    return handler, order_repo, cart_repo, product_repo, lamp.id, cable.id


class _UnreachableForFirstProduct(FakeProductRepository):
    """Loses the connection whenever stock of the first product is taken."""

    def decrement_stock(self, product_id, combination_key, quantity):
        if product_id == next(iter(self._store)):
            self.decrement_calls += 1
            raise AutoReconnect("connection reset")
        return super().decrement_stock(product_id, combination_key, quantity)


def _event(**overrides) -> dict:
    event = {"paymentSessionId": "cs_test_1", "sessionId": "sess-1", "paymentStatus": "paid"}
    event.update(overrides)
    return event


# ── Happy path ───────────────────────────────────────────────────────────────


class TestCompleteCheckout:

    def test_creates_paid_order_from_cart(self):
        handler, order_repo, _, _, lamp, _ = _setup()
        order = handler.handle(_event())

        assert order.id is not None
        assert order.status == OrderStatus.PAID
        assert order.payment_session_id == "cs_test_1"
        assert order.total_amount == Money.of("215")
        first = order.items[0]
        assert first.product_id == lamp
        assert first.product_name == "Desk Lamp"
        assert first.variant_name == "Color: Red"
        assert first.product_image == "/red.jpg"
        assert order_repo.get_by_id(order.id) is order

    def test_unpaid_is_pending(self):
        handler, *_ = _setup()
        assert handler.handle(_event(paymentStatus="unpaid")).status == OrderStatus.PENDING

    def test_provider_amount_wins(self):
        handler, *_ = _setup()
        order = handler.handle(_event(amountTotal=19999, currency="usd"))
        assert order.total_amount == Money.of("199.99", "USD")

    def test_reserves_stock_and_clears_cart(self):
        handler, _, cart_repo, product_repo, lamp, _ = _setup()
        handler.handle(_event())
        assert product_repo.get_by_id(lamp).stock_for(["red"]) == 3
        assert cart_repo.get_by_session_id("sess-1").items == []

    def test_idempotent_on_payment_session(self):
        handler, order_repo, _, product_repo, lamp, _ = _setup()
        first = handler.handle(_event())
        second = handler.handle(_event())
        assert second is first
        assert len(order_repo.list_by_session_id("sess-1")) == 1
        assert product_repo.get_by_id(lamp).stock_for(["red"]) == 3

    def test_missing_cart_still_records_order(self):
        handler, *_ = _setup()
        order = handler.handle(_event(sessionId="no-cart", amountTotal=500))
        assert order.items == []
        assert order.total_amount == Money.of("5")

    def test_invalid_event_rejected(self):
        handler, *_ = _setup()
        with pytest.raises(ValidationError):
            handler.handle({"sessionId": "sess-1"})


# ── Reservation failures ─────────────────────────────────────────────────────


class TestCheckoutStockIssues:

    def test_shortfall_flagged_not_rolled_back(self, caplog):
        handler, order_repo, cart_repo, product_repo, lamp, _ = _setup(red_stock=1)

        with caplog.at_level(logging.ERROR):
            order = handler.handle(_event())

        assert order_repo.get_by_id(order.id) is order
        assert order.needs_attention
        issue = order.stock_issues[0]
        assert (issue.product_id, issue.variant_key, issue.requested, issue.available) == (
            lamp, "red", 2, 1,
        )
        assert issue.code == "INSUFFICIENT_STOCK"
        assert "Stock reservation failed" in caplog.text
        # Stock untouched, cart still cleared.
        assert product_repo.get_by_id(lamp).stock_for(["red"]) == 1
        assert cart_repo.get_by_session_id("sess-1").items == []

    def test_deleted_product_flagged(self):
        handler, _, _, product_repo, lamp, _ = _setup()
        product_repo.delete(lamp)
        order = handler.handle(_event())
        assert order.items[0].product_name == lamp
        assert [i.code for i in order.stock_issues] == ["PRODUCT_NOT_FOUND"]
        assert order.stock_issues[0].available is None

    def test_datastore_error_flagged_and_rest_processed(self, caplog):
        handler, order_repo, cart_repo, product_repo, lamp, cable = _setup(
            product_repo_cls=_UnreachableForFirstProduct,
        )

        with caplog.at_level(logging.ERROR):
            order = handler.handle(_event())

        assert [(i.product_id, i.code, i.available) for i in order.stock_issues] == [
            (lamp, "INTERNAL_SERVER_ERROR", None),
        ]
        assert order_repo.get_by_id(order.id).needs_attention
        assert order_repo.save_calls == 2
        assert cart_repo.get_by_session_id("sess-1").items == []
        assert product_repo.get_by_id(lamp).stock_for(["red"]) == 5
        assert product_repo.decrement_calls == 2
        assert "AutoReconnect" in caplog.text

    def test_order_saved_again_only_when_flagged(self):
        handler, order_repo, *_ = _setup()
        handler.handle(_event())
        assert order_repo.save_calls == 1

        handler, order_repo, *_ = _setup(red_stock=0)
        handler.handle(_event())
        assert order_repo.save_calls == 2


# ── Order queries ────────────────────────────────────────────────────────────


class TestOrderHandlers:

    def test_show(self):
        handler, order_repo, *_ = _setup()
        order = handler.handle(_event())
        dto = ShowOrderHandler(order_repo).handle(order.id)
        assert dto.status == "paid"
        assert dto.total == "215.00 AED"
        assert dto.items[0].line_total == "200.00 AED"

    def test_show_unknown(self):
        with pytest.raises(EntityNotFoundError) as exc_info:
            ShowOrderHandler(FakeOrderRepository()).handle("missing")
        assert exc_info.value.code == "ORDER_NOT_FOUND"

    def test_list_by_session(self):
        handler, order_repo, *_ = _setup()
        handler.handle(_event())
        handler.handle(_event(paymentSessionId="cs_test_2"))
        orders = ListOrdersHandler(order_repo).handle("sess-1")
        assert len(orders) == 2
        assert ListOrdersHandler(order_repo).handle("other") == []

    def test_update_status(self):
        handler, order_repo, *_ = _setup()
        order = handler.handle(_event(paymentStatus="unpaid"))
        UpdateOrderStatusHandler(order_repo).handle(order.id, "cancelled")
        assert order_repo.get_by_id(order.id).status == OrderStatus.CANCELLED

    def test_update_status_unknown_value(self):
        handler, order_repo, *_ = _setup()
        order = handler.handle(_event())
        with pytest.raises(ValidationError) as exc_info:
            UpdateOrderStatusHandler(order_repo).handle(order.id, "shipped")
        assert exc_info.value.code == "INVALID_ORDER_STATUS"
