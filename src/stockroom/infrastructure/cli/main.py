import logging

import click

from stockroom.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_merge,
    cart_remove,
    cart_show,
    cart_update,
)
from stockroom.infrastructure.cli.order_commands import (
    order_complete_checkout,
    order_list,
    order_set_status,
    order_show,
)
from stockroom.infrastructure.cli.product_commands import (
    product_add_images,
    product_create,
    product_delete,
    product_delete_image,
    product_list,
    product_map_images,
    product_show,
    product_update,
)
from stockroom.infrastructure.cli.stock_commands import cart_validate, stock_set, stock_show
from stockroom.infrastructure.cli.variant_type_commands import (
    variant_type_add_item,
    variant_type_create,
    variant_type_delete,
    variant_type_list,
    variant_type_remove_item,
    variant_type_update,
)
from stockroom.infrastructure.cli.wishlist_commands import (
    wishlist_add,
    wishlist_clear,
    wishlist_remove,
    wishlist_show,
)
from stockroom.infrastructure.config import get_settings


@click.group()
def cli() -> None:
    """Stockroom: catalog, variant stock and storefront checkout."""
    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def stock() -> None:
    """Manage variant stock."""


@cli.group("variant-type")
def variant_type() -> None:
    """Manage variant types."""


@cli.group()
def cart() -> None:
    """Manage storefront carts."""


@cli.group()
def wishlist() -> None:
    """Manage storefront wishlists."""


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
product.add_command(product_add_images)
product.add_command(product_create)
product.add_command(product_delete)
product.add_command(product_delete_image)
product.add_command(product_list)
product.add_command(product_map_images)
product.add_command(product_show)
product.add_command(product_update)
stock.add_command(stock_set)
stock.add_command(stock_show)
stock.add_command(cart_validate)
variant_type.add_command(variant_type_add_item)
variant_type.add_command(variant_type_create)
variant_type.add_command(variant_type_delete)
variant_type.add_command(variant_type_list)
variant_type.add_command(variant_type_remove_item)
variant_type.add_command(variant_type_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_merge)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
cart.add_command(cart_validate)
wishlist.add_command(wishlist_add)
wishlist.add_command(wishlist_clear)
wishlist.add_command(wishlist_remove)
wishlist.add_command(wishlist_show)
order.add_command(order_complete_checkout)
order.add_command(order_list)
order.add_command(order_set_status)
order.add_command(order_show)
