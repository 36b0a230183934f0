"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_by_session_id(self, session_id: str) -> Cart | None:
        """Return the cart of a storefront session, or None."""

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Cart | None:
        """Return the cart owned by a logged-in user, or None."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""

    @abstractmethod
    def delete(self, cart: Cart) -> None:
        """Remove a cart."""
