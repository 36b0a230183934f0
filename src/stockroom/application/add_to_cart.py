"""Application service: Add To Cart use case."""

from __future__ import annotations

from stockroom.application.schemas import AddToCartInput, parse_input
from stockroom.domain.exceptions import InsufficientStockError, ProductNotFoundError
from stockroom.domain.model.cart import Cart, CartLineItem, normalize_variant_item_ids
from stockroom.domain.model.product import InstallationOption
from stockroom.domain.model.variant import variant_combination_key
from stockroom.domain.repository.cart_repository import CartRepository
from stockroom.domain.repository.product_repository import ProductRepository


class AddToCartHandler:

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(self, session_id: str, payload: dict) -> Cart:
        """Add a line to the session's cart, creating the cart if needed.

        Prices are snapshotted from the product. A tracked combination
        cannot be added beyond its current stock; untracked ones are
        unlimited.
        """
        data = parse_input(AddToCartInput, payload)

        product = self._product_repo.get_by_id(data.product_id)
        if product is None:
            raise ProductNotFoundError(data.product_id)

        item_ids = normalize_variant_item_ids(data.selected_variant_item_ids)
        option = InstallationOption(data.installation_option)
        add_on = (
            product.installation_add_on_price(option, data.installation_location_id)
            if option is not InstallationOption.NONE
            else None
        )

        cart = self._cart_repo.get_by_session_id(session_id)
        if cart is None:
            cart = Cart(id=None, session_id=session_id)

        existing = cart.find_item(data.product_id, item_ids)
        wanted = data.quantity + (existing.quantity if existing is not None else 0)
        key = variant_combination_key(item_ids)
        entry = product.stock_entry_for(key)
        if entry is not None and wanted > entry.stock_count:
            raise InsufficientStockError(
                product_id=data.product_id,
                variant_key=key,
                requested=wanted,
                available=entry.stock_count,
            )

        cart.add_item(
            CartLineItem(
                product_id=data.product_id,
                selected_variant_item_ids=item_ids,
                quantity=data.quantity,
                unit_price=product.unit_price_for(item_ids),
                installation_option=option,
                installation_add_on_price=add_on,
                installation_location_id=data.installation_location_id,
            )
        )
        self._cart_repo.save(cart)
        return cart
