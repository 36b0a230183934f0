"""MongoDB-backed implementation of WishlistRepository."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pymongo.database import Database

from stockroom.domain.model.wishlist import Wishlist, WishlistItem
from stockroom.domain.repository.wishlist_repository import WishlistRepository
from stockroom.infrastructure.persistence.documents import to_object_id

logger = logging.getLogger(__name__)

COLLECTION = "storefrontWishlists"


class MongoWishlistRepository(WishlistRepository):

    def __init__(self, db: Database) -> None:
        self._collection = db[COLLECTION]
        self._collection.create_index("sessionId", unique=True)
        logger.debug("Indexes ensured on %s", COLLECTION)

    def get_by_session_id(self, session_id: str) -> Wishlist | None:
        raw = self._collection.find_one({"sessionId": session_id})
        if raw is None:
            return None
        now = datetime.now(timezone.utc)
        return Wishlist(
            id=str(raw["_id"]),
            session_id=raw["sessionId"],
            items=[
                WishlistItem(
                    product_id=item["productId"],
                    selected_variant_item_ids=tuple(item.get("selectedVariantItemIds", [])),
                    created_at=item.get("createdAt", now),
                )
                for item in raw.get("items", [])
            ],
            created_at=raw.get("createdAt", now),
            updated_at=raw.get("updatedAt", now),
        )

    def save(self, wishlist: Wishlist) -> None:
        raw = {
            "sessionId": wishlist.session_id,
            "items": [
                {
                    "productId": item.product_id,
                    "selectedVariantItemIds": list(item.selected_variant_item_ids),
                    "createdAt": item.created_at,
                }
                for item in wishlist.items
            ],
            "createdAt": wishlist.created_at,
            "updatedAt": wishlist.updated_at,
        }
        if wishlist.id is None:
            result = self._collection.insert_one(raw)
            wishlist.id = str(result.inserted_id)
        else:
            self._collection.replace_one({"_id": to_object_id(wishlist.id, "wishlist id")}, raw)
