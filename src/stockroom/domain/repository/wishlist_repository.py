"""Abstract repository for the Wishlist aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.wishlist import Wishlist


class WishlistRepository(ABC):

    @abstractmethod
    def get_by_session_id(self, session_id: str) -> Wishlist | None:
        """Return the wishlist of a storefront session, or None."""

    @abstractmethod
    def save(self, wishlist: Wishlist) -> None:
        """Persist a new or updated wishlist."""
