"""MongoDB-backed implementation of CartRepository."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pymongo.database import Database

from stockroom.domain.model.cart import Cart, CartLineItem
from stockroom.domain.model.product import InstallationOption
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY
from stockroom.domain.repository.cart_repository import CartRepository
from stockroom.infrastructure.persistence.documents import (
    money_from_raw,
    money_to_raw,
    to_object_id,
)

logger = logging.getLogger(__name__)

COLLECTION = "storefrontCarts"


class MongoCartRepository(CartRepository):

    def __init__(self, db: Database) -> None:
        self._collection = db[COLLECTION]
        self._ensure_indexes()

    # --- CartRepository interface ---------------------------------------------

    def get_by_session_id(self, session_id: str) -> Cart | None:
        raw = self._collection.find_one({"sessionId": session_id})
        return self._to_domain(raw) if raw is not None else None

    def get_by_user_id(self, user_id: str) -> Cart | None:
        raw = self._collection.find_one({"userId": user_id})
        return self._to_domain(raw) if raw is not None else None

    def save(self, cart: Cart) -> None:
        raw = self._to_raw(cart)
        if cart.id is None:
            result = self._collection.insert_one(raw)
            cart.id = str(result.inserted_id)
        else:
            self._collection.replace_one({"_id": to_object_id(cart.id, "cart id")}, raw)

    def delete(self, cart: Cart) -> None:
        if cart.id is not None:
            self._collection.delete_one({"_id": to_object_id(cart.id, "cart id")})

    # --- Serialization helpers ------------------------------------------------

    def _ensure_indexes(self) -> None:
        self._collection.create_index("sessionId", unique=True)
        self._collection.create_index("userId")
        logger.debug("Indexes ensured on %s", COLLECTION)

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "sessionId": cart.session_id,
            "userId": cart.user_id,
            "currency": cart.subtotal.currency,
            "items": [
                {
                    "productId": item.product_id,
                    "selectedVariantItemIds": list(item.selected_variant_item_ids),
                    "quantity": item.quantity,
                    "unitPrice": money_to_raw(item.unit_price),
                    "installationOption": item.installation_option.value,
                    "installationAddOnPrice": money_to_raw(item.installation_add_on_price),
                    "installationLocationId": item.installation_location_id,
                    "createdAt": item.created_at,
                    "updatedAt": item.updated_at,
                }
                for item in cart.items
            ],
            "createdAt": cart.created_at,
            "updatedAt": cart.updated_at,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        currency = raw.get("currency") or DEFAULT_CURRENCY
        now = datetime.now(timezone.utc)
        return Cart(
            id=str(raw["_id"]),
            session_id=raw["sessionId"],
            user_id=raw.get("userId"),
            items=[
                CartLineItem(
                    product_id=item["productId"],
                    selected_variant_item_ids=tuple(item.get("selectedVariantItemIds", [])),
                    quantity=int(item["quantity"]),
                    unit_price=money_from_raw(item.get("unitPrice", 0), currency),
                    installation_option=InstallationOption(
                        item.get("installationOption") or InstallationOption.NONE.value
                    ),
                    installation_add_on_price=money_from_raw(
                        item.get("installationAddOnPrice"), currency
                    ),
                    installation_location_id=item.get("installationLocationId"),
                    created_at=item.get("createdAt", now),
                    updated_at=item.get("updatedAt", now),
                )
                for item in raw.get("items", [])
            ],
            created_at=raw.get("createdAt", now),
            updated_at=raw.get("updatedAt", now),
        )
