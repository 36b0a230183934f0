"""CLI commands for the storefront Wishlist."""

from __future__ import annotations

import click

from stockroom.application.wishlist import (
    AddToWishlistHandler,
    ClearWishlistHandler,
    RemoveFromWishlistHandler,
    ShowWishlistHandler,
)
from stockroom.domain.model.wishlist import Wishlist
from stockroom.infrastructure.bootstrap import product_repository, wishlist_repository
from stockroom.infrastructure.cli.common import fail, split_ids


def _display_wishlist(wishlist: Wishlist) -> None:
    if not wishlist.items:
        click.echo(f"Wishlist for session {wishlist.session_id} is empty.")
        return
    click.echo(f"Wishlist for session {wishlist.session_id}")
    for item in wishlist.items:
        variants = ", ".join(item.selected_variant_item_ids) or "-"
        click.echo(f"  {item.product_id:<26} {variants}")


@click.command("add")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--items", default="", help="Variant item ids as 'id1,id2'.")
def wishlist_add(session_id: str, product_id: str, items: str) -> None:
    """Add a product to the wishlist."""
    handler = AddToWishlistHandler(
        wishlist_repo=wishlist_repository(),
        product_repo=product_repository(),
    )

    try:
        wishlist = handler.handle(session_id, product_id, split_ids(items))
    except Exception as exc:
        raise fail(exc) from exc

    _display_wishlist(wishlist)


@click.command("remove")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--items", default="", help="Variant item ids as 'id1,id2'.")
def wishlist_remove(session_id: str, product_id: str, items: str) -> None:
    """Remove a product from the wishlist."""
    handler = RemoveFromWishlistHandler(wishlist_repo=wishlist_repository())

    try:
        wishlist = handler.handle(session_id, product_id, split_ids(items))
    except Exception as exc:
        raise fail(exc) from exc

    _display_wishlist(wishlist)


@click.command("clear")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
def wishlist_clear(session_id: str) -> None:
    """Empty the wishlist."""
    handler = ClearWishlistHandler(wishlist_repo=wishlist_repository())

    try:
        handler.handle(session_id)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Wishlist for session {session_id} cleared.")


@click.command("show")
@click.option("--session", "session_id", required=True, help="Storefront session id.")
def wishlist_show(session_id: str) -> None:
    """Show the wishlist."""
    handler = ShowWishlistHandler(wishlist_repo=wishlist_repository())

    try:
        wishlist = handler.handle(session_id)
    except Exception as exc:
        raise fail(exc) from exc

    _display_wishlist(wishlist)
