"""Application service: Merge Carts use case (guest cart on login)."""

from __future__ import annotations

from stockroom.domain.model.cart import Cart
from stockroom.domain.repository.cart_repository import CartRepository


class MergeCartsHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, session_id: str, user_id: str) -> Cart:
        """Fold the guest cart of ``session_id`` into the user's cart.

        - no guest cart: the user's cart, or a new empty one
        - no user cart: the guest cart is adopted by the user
        - both: matching lines are summed, the rest appended, and the
          guest cart is deleted
        """
        guest = self._cart_repo.get_by_session_id(session_id)
        user_cart = self._cart_repo.get_by_user_id(user_id)

        if guest is None:
            if user_cart is not None:
                return user_cart
            cart = Cart(id=None, session_id=session_id, user_id=user_id)
            self._cart_repo.save(cart)
            return cart

        if user_cart is None or user_cart.id == guest.id:
            guest.user_id = user_id
            guest.touch()
            self._cart_repo.save(guest)
            return guest

        user_cart.absorb(guest)
        self._cart_repo.save(user_cart)
        self._cart_repo.delete(guest)
        return user_cart
