"""CLI commands for the storefront Cart."""

from __future__ import annotations

import click

from stockroom.application.add_to_cart import AddToCartHandler
from stockroom.application.dto import CartDTO
from stockroom.application.merge_carts import MergeCartsHandler
from stockroom.application.show_cart import ShowCartHandler
from stockroom.application.update_cart import (
    ClearCartHandler,
    RemoveFromCartHandler,
    UpdateCartItemHandler,
)
from stockroom.infrastructure.bootstrap import cart_repository, product_repository
from stockroom.infrastructure.cli.common import fail, split_ids

session_option = click.option("--session", "session_id", required=True, help="Storefront session id.")


def _display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo(f"Cart for session {dto.session_id} is empty.")
        return

    click.echo(f"Cart for session {dto.session_id}")
    click.echo()
    click.echo(f"  {'Product':<26} {'Variant':<24} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*87}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<26} {item.variant_key:<24} {item.quantity:>5} "
            f"{item.unit_price:>14} {item.line_total:>14}"
        )
        if item.installation_option != "none":
            click.echo(f"    installation: {item.installation_option}")
    click.echo(f"  {'-'*87}")
    click.echo(f"  {'Subtotal':<20} {dto.total_items:>37} items {dto.subtotal:>14}")


@click.command("add")
@session_option
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--items", default="", help="Variant item ids as 'id1,id2'.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int)
@click.option(
    "--installation",
    type=click.Choice(["none", "in_store", "at_home"]),
    default="none",
    show_default=True,
)
@click.option("--location", "location_id", default=None, help="Installation location id.")
def cart_add(
    session_id: str,
    product_id: str,
    items: str,
    quantity: int,
    installation: str,
    location_id: str | None,
) -> None:
    """Add a product to the session's cart."""
    handler = AddToCartHandler(cart_repo=cart_repository(), product_repo=product_repository())
    payload = {
        "productId": product_id,
        "selectedVariantItemIds": split_ids(items),
        "quantity": quantity,
        "installationOption": installation,
        "installationLocationId": location_id,
    }

    try:
        cart = handler.handle(session_id, payload)
    except Exception as exc:
        raise fail(exc) from exc

    _display_cart(CartDTO.from_cart(cart))


@click.command("update")
@session_option
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--items", default="", help="Variant item ids as 'id1,id2'.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity; 0 removes the line.")
def cart_update(session_id: str, product_id: str, items: str, quantity: int) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartItemHandler(cart_repo=cart_repository(), product_repo=product_repository())
    payload = {
        "productId": product_id,
        "selectedVariantItemIds": split_ids(items),
        "quantity": quantity,
    }

    try:
        cart = handler.handle(session_id, payload)
    except Exception as exc:
        raise fail(exc) from exc

    _display_cart(CartDTO.from_cart(cart))


@click.command("remove")
@session_option
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--items", default="", help="Variant item ids as 'id1,id2'.")
def cart_remove(session_id: str, product_id: str, items: str) -> None:
    """Remove a line from the cart."""
    handler = RemoveFromCartHandler(cart_repo=cart_repository())

    try:
        cart = handler.handle(session_id, product_id, split_ids(items))
    except Exception as exc:
        raise fail(exc) from exc

    _display_cart(CartDTO.from_cart(cart))


@click.command("clear")
@session_option
def cart_clear(session_id: str) -> None:
    """Empty the cart."""
    handler = ClearCartHandler(cart_repo=cart_repository())

    try:
        handler.handle(session_id)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Cart for session {session_id} cleared.")


@click.command("show")
@session_option
def cart_show(session_id: str) -> None:
    """Show the session's cart."""
    handler = ShowCartHandler(cart_repo=cart_repository())

    try:
        dto = handler.handle(session_id)
    except Exception as exc:
        raise fail(exc) from exc

    _display_cart(dto)


@click.command("merge")
@session_option
@click.option("--user", "user_id", required=True, help="Id of the user logging in.")
def cart_merge(session_id: str, user_id: str) -> None:
    """Merge a guest cart into the user's cart."""
    handler = MergeCartsHandler(cart_repo=cart_repository())

    try:
        cart = handler.handle(session_id, user_id)
    except Exception as exc:
        raise fail(exc) from exc

    _display_cart(CartDTO.from_cart(cart))
