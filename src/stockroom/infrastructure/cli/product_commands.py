"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from stockroom.application.create_product import CreateProductHandler
from stockroom.application.delete_product import DeleteProductHandler
from stockroom.application.product_images import (
    AddProductImagesHandler,
    DeleteProductImageHandler,
    MapProductImagesHandler,
)
from stockroom.application.show_product import ListProductsHandler, ShowProductHandler
from stockroom.application.update_product import UpdateProductHandler
from stockroom.domain.model.product import Product
from stockroom.infrastructure.bootstrap import product_repository
from stockroom.infrastructure.cli.common import fail, read_payload
from stockroom.infrastructure.config import get_settings


def _display_product(product: Product) -> None:
    info = product.stock_info()
    click.echo(f"Product {product.id}  {product.name}")
    click.echo(f"Price:   {product.effective_base_price}", nl=False)
    if product.offer_percentage:
        click.echo(f"  (was {product.base_price}, -{product.offer_percentage}%)")
    else:
        click.echo()
    click.echo(f"Stock:   {info.status.value}  (total {info.total_stock})")
    for variant in product.variants:
        names = ", ".join(item.name for item in variant.selected_items)
        click.echo(f"  {variant.variant_type_name}: {names}")
    if product.images:
        click.echo(f"Images:  {len(product.images)}")
        for image in sorted(product.images, key=lambda i: i.order):
            mapped = ", ".join(image.mapped_variants) or "all"
            click.echo(f"  [{image.order}] {image.id}  {image.url}  ({mapped})")


@click.command("create")
@click.argument("payload", type=click.File("r"))
def product_create(payload) -> None:
    """Create a product from a JSON document (use '-' for stdin)."""
    settings = get_settings()
    handler = CreateProductHandler(
        product_repo=product_repository(),
        max_combinations=settings.MAX_VARIANT_COMBINATIONS,
        currency=settings.DEFAULT_CURRENCY,
    )
    data = read_payload(payload)

    try:
        product = handler.handle(data)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Product {product.id} created.")
    _display_product(product)


@click.command("update")
@click.argument("product_id")
@click.argument("payload", type=click.File("r"))
def product_update(product_id: str, payload) -> None:
    """Update fields of a product from a JSON document."""
    settings = get_settings()
    handler = UpdateProductHandler(
        product_repo=product_repository(),
        max_combinations=settings.MAX_VARIANT_COMBINATIONS,
        currency=settings.DEFAULT_CURRENCY,
    )
    data = read_payload(payload)

    try:
        product = handler.handle(product_id, data)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Product {product.id} updated.")
    _display_product(product)


@click.command("delete")
@click.argument("product_id")
def product_delete(product_id: str) -> None:
    """Delete a product."""
    handler = DeleteProductHandler(product_repo=product_repository())

    try:
        handler.handle(product_id)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Product {product_id} deleted.")


@click.command("show")
@click.argument("product_id")
def product_show(product_id: str) -> None:
    """Show a product."""
    handler = ShowProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(product_id)
    except Exception as exc:
        raise fail(exc) from exc

    _display_product(product)


@click.command("list")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--limit", default=20, show_default=True, type=int)
@click.option("--category", "sub_category_id", default=None, help="Sub-category id filter.")
def product_list(page: int, limit: int, sub_category_id: str | None) -> None:
    """List products, newest first."""
    handler = ListProductsHandler(product_repo=product_repository())

    try:
        result = handler.handle(page=page, limit=limit, sub_category_id=sub_category_id)
    except Exception as exc:
        raise fail(exc) from exc

    if not result.products:
        click.echo("No products found.")
        return

    click.echo(f"  {'ID':<26} {'Name':<24} {'Price':>14} {'Stock':>8}  Status")
    click.echo(f"  {'-'*88}")
    for p in result.products:
        click.echo(
            f"  {p.id:<26} {p.name:<24} {p.price:>14} {p.total_stock:>8}  {p.stock_status}"
        )
    pg = result.pagination
    click.echo(f"Page {pg.page}/{max(pg.total_pages, 1)}  ({pg.total} products)")


@click.command("add-images")
@click.argument("product_id")
@click.argument("payload", type=click.File("r"))
def product_add_images(product_id: str, payload) -> None:
    """Append images from a JSON list of {url, mappedVariants?, order?}."""
    handler = AddProductImagesHandler(product_repo=product_repository())

    images = read_payload(payload)
    if not isinstance(images, list):
        raise click.BadParameter("Expected a JSON list of images.")

    try:
        product = handler.handle(product_id, images)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Product {product.id} now has {len(product.images)} image(s).")


@click.command("delete-image")
@click.argument("product_id")
@click.argument("image_id")
def product_delete_image(product_id: str, image_id: str) -> None:
    """Remove one image from a product."""
    handler = DeleteProductImageHandler(product_repo=product_repository())

    try:
        removed = handler.handle(product_id, image_id)
    except Exception as exc:
        raise fail(exc) from exc

    click.echo(f"Image {removed.id} removed ({removed.url}).")


@click.command("map-images")
@click.argument("product_id")
@click.argument("payload", type=click.File("r"))
def product_map_images(product_id: str, payload) -> None:
    """Map images to variant items from a JSON list of {imageId, variantItemIds}."""
    handler = MapProductImagesHandler(product_repo=product_repository())

    mappings = read_payload(payload)
    if not isinstance(mappings, list):
        raise click.BadParameter("Expected a JSON list of mappings.")

    try:
        product = handler.handle(product_id, mappings)
    except Exception as exc:
        raise fail(exc) from exc

    _display_product(product)
