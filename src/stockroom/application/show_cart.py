"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from stockroom.application.dto import CartDTO
from stockroom.domain.model.cart import Cart
from stockroom.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, session_id: str) -> CartDTO:
        """A session without a cart sees an empty one; nothing is stored."""
        cart = self._cart_repo.get_by_session_id(session_id)
        if cart is None:
            cart = Cart(id=None, session_id=session_id)
        return CartDTO.from_cart(cart)
