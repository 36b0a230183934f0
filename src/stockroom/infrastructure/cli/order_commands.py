"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from stockroom.application.complete_checkout import CompleteCheckoutHandler
from stockroom.application.dto import OrderDTO
from stockroom.application.show_order import (
    ListOrdersHandler,
    ShowOrderHandler,
    UpdateOrderStatusHandler,
)
from stockroom.domain.model.order import OrderStatus
from stockroom.infrastructure.bootstrap import (
    cart_repository,
    order_repository,
    product_repository,
    stock_service,
)
from stockroom.infrastructure.cli.common import fail
from stockroom.infrastructure.config import get_settings


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Session: {dto.session_id}")
    click.echo(f"Created: {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Variant':<24} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*85}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.variant_name or '-':<24} {item.quantity:>5} "
            f"{item.unit_price:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*85}")
    click.echo(f"  {'Order Total':<30} {dto.total:>54}")

    if dto.needs_attention:
        click.echo()
        click.echo("Stock issues (needs attention):")
        for issue in dto.stock_issues:
            click.echo(f"  {issue}")


@click.command("complete-checkout")
@click.option("--payment-session", "payment_session_id", required=True, help="Payment provider session id.")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
@click.option("--paid/--unpaid", default=True, show_default=True, help="Payment status reported.")
@click.option("--amount-total", default=None, type=int, help="Charged amount in minor units.")
@click.option("--currency", default=None, help="Charged currency.")
def order_complete_checkout(
    payment_session_id: str,
    session_id: str,
    paid: bool,
    amount_total: int | None,
    currency: str | None,
) -> None:
    """Turn a completed checkout into an order and reserve its stock."""
    handler = CompleteCheckoutHandler(
        order_repo=order_repository(),
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        stock_service=stock_service(),
        currency=get_settings().DEFAULT_CURRENCY,
    )
    event = {
        "paymentSessionId": payment_session_id,
        "sessionId": session_id,
        "paymentStatus": "paid" if paid else "unpaid",
        "amountTotal": amount_total,
        "currency": currency,
    }

    try:
        order = handler.handle(event)
    except Exception as exc:
        raise fail(exc) from exc

    _display_order(OrderDTO.from_order(order))


@click.command("show")
@click.argument("order_id")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except Exception as exc:
        raise fail(exc) from exc

    _display_order(dto)


@click.command("list")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
def order_list(session_id: str) -> None:
    """List a session's orders, newest first."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        orders = handler.handle(session_id)
    except Exception as exc:
        raise fail(exc) from exc

    if not orders:
        click.echo("No orders found.")
        return
    for dto in orders:
        flag = "  !" if dto.needs_attention else ""
        click.echo(f"  #{dto.id}  {dto.created_at}  {dto.status:<10} {dto.total:>14}{flag}")


@click.command("set-status")
@click.argument("order_id")
@click.argument("status", type=click.Choice([s.value for s in OrderStatus]))
def order_set_status(order_id: str, status: str) -> None:
    """Change an order's status."""
    handler = UpdateOrderStatusHandler(order_repo=order_repository())

    try:
        order = handler.handle(order_id, status)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Order #{order.id} is now {order.status.value}.")
