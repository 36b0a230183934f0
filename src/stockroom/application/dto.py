"""Data Transfer Objects: plain containers that cross layer boundaries.

Money is rendered as strings here so the CLI never touches domain
value objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockroom.domain.model.cart import Cart
from stockroom.domain.model.order import Order


@dataclass(frozen=True)
class PaginationDTO:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class ProductSummaryDTO:
    id: str
    name: str
    price: str
    stock_status: str
    total_stock: int


@dataclass(frozen=True)
class ProductPageDTO:
    products: list[ProductSummaryDTO]
    pagination: PaginationDTO


@dataclass(frozen=True)
class StockLineDTO:
    """One generated combination and its ledger state."""

    key: str
    label: str
    tracked: bool
    stock_count: int | None
    price: str


@dataclass(frozen=True)
class VariantStockReportDTO:
    product_id: str
    product_name: str
    status: str
    total_stock: int
    lines: list[StockLineDTO]


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    variant_key: str
    quantity: int
    unit_price: str
    installation_option: str
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    id: str
    session_id: str
    items: list[CartLineDTO]
    subtotal: str
    total_items: int

    @staticmethod
    def from_cart(cart: Cart) -> CartDTO:
        return CartDTO(
            id=cart.id or "",
            session_id=cart.session_id,
            items=[
                CartLineDTO(
                    product_id=item.product_id,
                    variant_key=item.variant_key,
                    quantity=item.quantity,
                    unit_price=str(item.unit_price),
                    installation_option=item.installation_option.value,
                    line_total=str(item.line_total),
                )
                for item in cart.items
            ],
            subtotal=str(cart.subtotal),
            total_items=cart.total_items,
        )


@dataclass(frozen=True)
class OrderItemDTO:
    product_name: str
    variant_name: str | None
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    id: str
    session_id: str
    status: str
    items: list[OrderItemDTO]
    total: str
    needs_attention: bool
    stock_issues: list[str]
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id or "",
            session_id=order.session_id,
            status=order.status.value,
            items=[
                OrderItemDTO(
                    product_name=item.product_name,
                    variant_name=item.variant_name,
                    quantity=item.quantity.value,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                )
                for item in order.items
            ],
            total=str(order.total_amount),
            needs_attention=order.needs_attention,
            stock_issues=[
                f"{issue.code}: product {issue.product_id} ({issue.variant_key}) "
                f"requested {issue.requested}, available {issue.available}"
                for issue in order.stock_issues
            ],
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )
