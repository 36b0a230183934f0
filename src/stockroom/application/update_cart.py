"""Application services: changing or emptying an existing cart."""

from __future__ import annotations

from stockroom.application.schemas import UpdateCartItemInput, parse_input
from stockroom.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
)
from stockroom.domain.model.cart import Cart, normalize_variant_item_ids
from stockroom.domain.model.variant import variant_combination_key
from stockroom.domain.repository.cart_repository import CartRepository
from stockroom.domain.repository.product_repository import ProductRepository


def load_cart(cart_repo: CartRepository, session_id: str) -> Cart:
    cart = cart_repo.get_by_session_id(session_id)
    if cart is None:
        raise EntityNotFoundError(
            f"No cart for session '{session_id}'",
            code="CART_NOT_FOUND",
            details={"sessionId": session_id},
        )
    return cart


class UpdateCartItemHandler:

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(self, session_id: str, payload: dict) -> Cart:
        """Set a line's quantity; zero or less removes the line."""
        data = parse_input(UpdateCartItemInput, payload)
        cart = load_cart(self._cart_repo, session_id)
        item_ids = normalize_variant_item_ids(data.selected_variant_item_ids)

        unit_price = None
        if data.quantity > 0:
            product = self._product_repo.get_by_id(data.product_id)
            if product is None:
                raise ProductNotFoundError(data.product_id)
            key = variant_combination_key(item_ids)
            entry = product.stock_entry_for(key)
            if entry is not None and data.quantity > entry.stock_count:
                raise InsufficientStockError(
                    product_id=data.product_id,
                    variant_key=key,
                    requested=data.quantity,
                    available=entry.stock_count,
                )
            unit_price = product.unit_price_for(item_ids)

        cart.update_quantity(data.product_id, item_ids, data.quantity, unit_price)
        self._cart_repo.save(cart)
        return cart


class RemoveFromCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, session_id: str, product_id: str, selected_variant_item_ids: list[str]) -> Cart:
        cart = load_cart(self._cart_repo, session_id)
        cart.remove_item(product_id, selected_variant_item_ids)
        self._cart_repo.save(cart)
        return cart


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, session_id: str) -> Cart:
        cart = load_cart(self._cart_repo, session_id)
        cart.clear()
        self._cart_repo.save(cart)
        return cart
