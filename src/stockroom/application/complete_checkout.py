"""Application service: Complete Checkout use case.

Runs when the payment provider reports a checkout session as completed.
The order is stored before any stock is touched. Each item is then
reserved on its own; a reservation that fails is logged and recorded on
the order instead of undoing it, so a paid customer always has an order
and staff can see what needs restocking or refunding.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from stockroom.application.schemas import CheckoutCompletedEvent, parse_input
from stockroom.domain.exceptions import DomainException, InsufficientStockError
from stockroom.domain.model.cart import Cart, CartLineItem
from stockroom.domain.model.order import Order, OrderItem, OrderStatus, StockIssue
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from stockroom.domain.repository.cart_repository import CartRepository
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.domain.service.variant_stock_service import VariantStockService

logger = logging.getLogger(__name__)

# Stock issue code for reservations that failed outside the domain rules.
RESERVATION_ERROR = "INTERNAL_SERVER_ERROR"


class CompleteCheckoutHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        stock_service: VariantStockService,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._stock_service = stock_service
        self._currency = currency

    def handle(self, payload: dict) -> Order:
        event = parse_input(CheckoutCompletedEvent, payload)

        existing = self._order_repo.get_by_payment_session_id(event.payment_session_id)
        if existing is not None:
            logger.info(
                "Checkout %s already processed as order %s", event.payment_session_id, existing.id
            )
            return existing

        cart = self._cart_repo.get_by_session_id(event.session_id)
        lines = list(cart.items) if cart is not None else []
        items = [self._snapshot(line) for line in lines]

        order = Order.create(
            session_id=event.session_id,
            items=items,
            total_amount=self._total(event, cart),
            status=OrderStatus.PAID if event.payment_status == "paid" else OrderStatus.PENDING,
            payment_session_id=event.payment_session_id,
        )
        self._order_repo.save(order)

        # Reserve per item; failures are flagged on the order, never rolled back.
        for item in order.items:
            try:
                self._stock_service.reduce_variant_stock(
                    item.product_id,
                    item.selected_variant_item_ids,
                    item.quantity.value,
                )
            except DomainException as exc:
                logger.error(
                    "Stock reservation failed for order %s, product %s (%s): %s",
                    order.id, item.product_id, item.variant_key, exc,
                )
                code = exc.code
                available = exc.available if isinstance(exc, InsufficientStockError) else None
            except Exception:
                logger.exception(
                    "Stock reservation failed for order %s, product %s (%s)",
                    order.id, item.product_id, item.variant_key,
                )
                code, available = RESERVATION_ERROR, None
            else:
                continue

            order.flag_stock_issue(
                StockIssue(
                    product_id=item.product_id,
                    variant_key=item.variant_key,
                    requested=item.quantity.value,
                    code=code,
                    available=available,
                )
            )

        if order.needs_attention:
            self._order_repo.save(order)

        if cart is not None:
            cart.clear()
            self._cart_repo.save(cart)

        logger.info("Order %s created for session %s", order.id, order.session_id)
        return order

    def _snapshot(self, line: CartLineItem) -> OrderItem:
        product = self._product_repo.get_by_id(line.product_id)
        unit_price = line.unit_price
        if line.installation_add_on_price is not None:
            unit_price = unit_price + line.installation_add_on_price

        if product is None:
            return OrderItem(
                product_id=line.product_id,
                product_name=line.product_id,
                selected_variant_item_ids=line.selected_variant_item_ids,
                quantity=Quantity(line.quantity),
                unit_price=unit_price,
            )

        images = product.images_for_variants(line.selected_variant_item_ids)
        return OrderItem(
            product_id=line.product_id,
            product_name=product.name,
            selected_variant_item_ids=line.selected_variant_item_ids,
            quantity=Quantity(line.quantity),
            unit_price=unit_price,
            variant_name=product.variant_label(line.selected_variant_item_ids),
            product_image=images[0].url if images else None,
        )

    def _total(self, event: CheckoutCompletedEvent, cart: Cart | None) -> Money:
        """The provider's charged amount wins over the cart subtotal."""
        if event.amount_total is not None:
            currency = event.currency.upper() if event.currency else self._currency
            return Money.of(Decimal(event.amount_total) / 100, currency)
        if cart is not None and cart.items:
            return cart.subtotal
        return Money.zero(self._currency)
