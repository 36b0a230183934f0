"""Application services: session wishlist."""

from __future__ import annotations

from stockroom.domain.exceptions import ProductNotFoundError
from stockroom.domain.model.wishlist import Wishlist
from stockroom.domain.repository.product_repository import ProductRepository
from stockroom.domain.repository.wishlist_repository import WishlistRepository


class _WishlistHandler:

    def __init__(self, wishlist_repo: WishlistRepository) -> None:
        self._wishlist_repo = wishlist_repo

    def _load_or_new(self, session_id: str) -> Wishlist:
        wishlist = self._wishlist_repo.get_by_session_id(session_id)
        if wishlist is None:
            wishlist = Wishlist(id=None, session_id=session_id)
        return wishlist


class AddToWishlistHandler(_WishlistHandler):

    def __init__(self, wishlist_repo: WishlistRepository, product_repo: ProductRepository) -> None:
        super().__init__(wishlist_repo)
        self._product_repo = product_repo

    def handle(
        self,
        session_id: str,
        product_id: str,
        selected_variant_item_ids: list[str] | None = None,
    ) -> Wishlist:
        if self._product_repo.get_by_id(product_id) is None:
            raise ProductNotFoundError(product_id)
        wishlist = self._load_or_new(session_id)
        wishlist.add(product_id, selected_variant_item_ids or [])
        self._wishlist_repo.save(wishlist)
        return wishlist


class RemoveFromWishlistHandler(_WishlistHandler):

    def handle(
        self,
        session_id: str,
        product_id: str,
        selected_variant_item_ids: list[str] | None = None,
    ) -> Wishlist:
        wishlist = self._load_or_new(session_id)
        wishlist.remove(product_id, selected_variant_item_ids or [])
        self._wishlist_repo.save(wishlist)
        return wishlist


class ClearWishlistHandler(_WishlistHandler):

    def handle(self, session_id: str) -> Wishlist:
        wishlist = self._load_or_new(session_id)
        wishlist.clear()
        self._wishlist_repo.save(wishlist)
        return wishlist


class ShowWishlistHandler(_WishlistHandler):

    def handle(self, session_id: str) -> Wishlist:
        return self._load_or_new(session_id)
