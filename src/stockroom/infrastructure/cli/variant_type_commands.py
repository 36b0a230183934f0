"""CLI commands for variant types."""

from __future__ import annotations

import click

from stockroom.application.variant_types import (
    AddVariantItemHandler,
    CreateVariantTypeHandler,
    DeleteVariantTypeHandler,
    ListVariantTypesHandler,
    RemoveVariantItemHandler,
    UpdateVariantTypeHandler,
)
from stockroom.domain.model.variant import VariantType
from stockroom.infrastructure.bootstrap import variant_type_repository
from stockroom.infrastructure.cli.common import fail


def _display_variant_type(variant_type: VariantType) -> None:
    click.echo(f"{variant_type.name}  ({variant_type.id})")
    for item in variant_type.items:
        click.echo(f"  {item.id:<34} {item.name}")


@click.command("create")
@click.argument("name")
@click.option("--item", "items", multiple=True, required=True, help="Item name; repeatable.")
def variant_type_create(name: str, items: tuple[str, ...]) -> None:
    """Create a variant type with its items."""
    handler = CreateVariantTypeHandler(variant_type_repo=variant_type_repository())

    try:
        variant_type = handler.handle({"name": name, "items": [{"name": i} for i in items]})
    except Exception as exc:
        raise fail(exc) from exc

    _display_variant_type(variant_type)


@click.command("update")
@click.argument("variant_type_id")
@click.option("--name", default=None, help="New name.")
@click.option("--item", "items", multiple=True, help="Replacement item name; repeatable.")
def variant_type_update(variant_type_id: str, name: str | None, items: tuple[str, ...]) -> None:
    """Rename a variant type and/or replace its items."""
    payload: dict = {}
    if name is not None:
        payload["name"] = name
    if items:
        payload["items"] = [{"name": i} for i in items]
    handler = UpdateVariantTypeHandler(variant_type_repo=variant_type_repository())

    try:
        variant_type = handler.handle(variant_type_id, payload)
    except Exception as exc:
        raise fail(exc) from exc

    _display_variant_type(variant_type)


@click.command("list")
def variant_type_list() -> None:
    """List variant types."""
    handler = ListVariantTypesHandler(variant_type_repo=variant_type_repository())

    try:
        variant_types = handler.handle()
    except Exception as exc:
        raise fail(exc) from exc

    if not variant_types:
        click.echo("No variant types found.")
        return
    for variant_type in variant_types:
        _display_variant_type(variant_type)


@click.command("add-item")
@click.argument("variant_type_id")
@click.argument("name")
def variant_type_add_item(variant_type_id: str, name: str) -> None:
    """Add an item to a variant type."""
    handler = AddVariantItemHandler(variant_type_repo=variant_type_repository())

    try:
        variant_type = handler.handle(variant_type_id, {"name": name})
    except Exception as exc:
        raise fail(exc) from exc

    _display_variant_type(variant_type)


@click.command("remove-item")
@click.argument("variant_type_id")
@click.argument("item_id")
def variant_type_remove_item(variant_type_id: str, item_id: str) -> None:
    """Remove an item from a variant type."""
    handler = RemoveVariantItemHandler(variant_type_repo=variant_type_repository())

    try:
        variant_type = handler.handle(variant_type_id, item_id)
    except Exception as exc:
        raise fail(exc) from exc

    _display_variant_type(variant_type)


@click.command("delete")
@click.argument("variant_type_id")
def variant_type_delete(variant_type_id: str) -> None:
    """Delete a variant type."""
    handler = DeleteVariantTypeHandler(variant_type_repo=variant_type_repository())

    try:
        handler.handle(variant_type_id)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Variant type {variant_type_id} deleted.")
