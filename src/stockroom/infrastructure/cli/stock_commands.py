"""CLI commands for the variant stock ledger."""

from __future__ import annotations

from decimal import Decimal

import click

from stockroom.application.set_variant_stock import SetVariantStockHandler
from stockroom.application.show_variant_stock import ShowVariantStockHandler
from stockroom.application.validate_cart import ValidateCartHandler
from stockroom.infrastructure.bootstrap import cart_repository, product_repository, stock_service
from stockroom.infrastructure.cli.common import fail, split_ids
from stockroom.infrastructure.config import get_settings


@click.command("show")
@click.argument("product_id")
def stock_show(product_id: str) -> None:
    """Show stock for every variant combination of a product."""
    handler = ShowVariantStockHandler(
        product_repo=product_repository(),
        max_combinations=get_settings().MAX_VARIANT_COMBINATIONS,
    )

    try:
        report = handler.handle(product_id)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Stock for {report.product_name} ({report.product_id})")
    click.echo()
    click.echo(f"  {'Combination':<36} {'Key':<30} {'Stock':>9} {'Price':>14}")
    click.echo(f"  {'-'*92}")
    for line in report.lines:
        stock = str(line.stock_count) if line.tracked else "untracked"
        click.echo(f"  {line.label:<36} {line.key:<30} {stock:>9} {line.price:>14}")
    click.echo(f"  {'-'*92}")
    click.echo(f"  Status: {report.status}  (total {report.total_stock})")


@click.command("set")
@click.argument("product_id")
@click.option("--items", default="", help="Variant item ids as 'id1,id2'; empty for the default.")
@click.option("--count", required=True, type=click.IntRange(min=0), help="Units in stock.")
@click.option("--price", default=None, type=Decimal, help="Absolute unit price override.")
@click.option("--price-delta", default=None, type=Decimal, help="Amount added to the base price.")
def stock_set(
    product_id: str,
    items: str,
    count: int,
    price: Decimal | None,
    price_delta: Decimal | None,
) -> None:
    """Set the stock of one variant combination."""
    handler = SetVariantStockHandler(product_repo=product_repository())

    try:
        entry = handler.handle(
            product_id,
            split_ids(items),
            count,
            price=price,
            price_delta=price_delta,
        )
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Stock for '{entry.combination_key}' set to {entry.stock_count}.")


@click.command("validate")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
def cart_validate(session_id: str) -> None:
    """Check a session's cart against current stock (advisory)."""
    handler = ValidateCartHandler(cart_repo=cart_repository(), stock_service=stock_service())

    try:
        result = handler.handle(session_id)
    except Exception as exc:
        raise fail(exc) from exc

    if result.available:
        click.echo("All items are available.")
        return

    click.echo("Insufficient stock:")
    for item in result.insufficient_items:
        click.echo(
            f"  {item.product_id} ({item.variant_key}): "
            f"requested {item.requested}, available {item.available}"
        )
    click.get_current_context().exit(1)
