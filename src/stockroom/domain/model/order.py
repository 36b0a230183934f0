"""Order aggregate, the record of a completed checkout.

Orders are created from a cart once the payment provider reports the
checkout as completed. Stock is reserved afterwards, per item; a failed
reservation is recorded on the order for manual follow-up instead of
undoing the order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.value_objects import Money, Quantity
from stockroom.domain.model.variant import variant_combination_key


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class OrderItem:
    """Price and naming snapshot of a cart line at checkout time."""

    product_id: str
    product_name: str
    selected_variant_item_ids: tuple[str, ...]
    quantity: Quantity
    unit_price: Money
    variant_name: str | None = None
    product_image: str | None = None

    @property
    def variant_key(self) -> str:
        return variant_combination_key(self.selected_variant_item_ids)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StockIssue:
    """A reservation that failed after the order was placed."""

    product_id: str
    variant_key: str
    requested: int
    code: str
    available: int | None = None


@dataclass
class Order:
    id: str | None
    session_id: str
    items: list[OrderItem]
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    payment_session_id: str | None = None
    stock_issues: list[StockIssue] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        session_id: str,
        items: list[OrderItem],
        total_amount: Money,
        status: OrderStatus = OrderStatus.PENDING,
        payment_session_id: str | None = None,
    ) -> Order:
        if not session_id:
            raise ValidationError("Session id is required")
        return Order(
            id=None,
            session_id=session_id,
            items=list(items),
            total_amount=total_amount,
            status=status,
            payment_session_id=payment_session_id,
        )

    @property
    def currency(self) -> str:
        return self.total_amount.currency

    @property
    def needs_attention(self) -> bool:
        return bool(self.stock_issues)

    def flag_stock_issue(self, issue: StockIssue) -> None:
        self.stock_issues.append(issue)
        self.touch()

    def set_status(self, status: OrderStatus) -> None:
        self.status = status
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
