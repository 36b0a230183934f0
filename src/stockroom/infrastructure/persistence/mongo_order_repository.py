"""MongoDB-backed implementation of OrderRepository."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pymongo import DESCENDING
from pymongo.database import Database

from stockroom.domain.model.order import Order, OrderItem, OrderStatus, StockIssue
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY, Quantity
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.infrastructure.persistence.documents import (
    money_from_raw,
    money_to_raw,
    to_object_id,
)

logger = logging.getLogger(__name__)

COLLECTION = "orders"


class MongoOrderRepository(OrderRepository):

    def __init__(self, db: Database) -> None:
        self._collection = db[COLLECTION]
        self._ensure_indexes()

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        raw = self._collection.find_one({"_id": to_object_id(order_id, "order id")})
        return self._to_domain(raw) if raw is not None else None

    def get_by_payment_session_id(self, payment_session_id: str) -> Order | None:
        raw = self._collection.find_one({"paymentSessionId": payment_session_id})
        return self._to_domain(raw) if raw is not None else None

    def list_by_session_id(self, session_id: str) -> list[Order]:
        cursor = self._collection.find({"sessionId": session_id}).sort("createdAt", DESCENDING)
        return [self._to_domain(raw) for raw in cursor]

    def save(self, order: Order) -> None:
        raw = self._to_raw(order)
        if order.id is None:
            result = self._collection.insert_one(raw)
            order.id = str(result.inserted_id)
        else:
            self._collection.replace_one({"_id": to_object_id(order.id, "order id")}, raw)

    # --- Serialization helpers ------------------------------------------------

    def _ensure_indexes(self) -> None:
        self._collection.create_index("sessionId")
        self._collection.create_index("paymentSessionId", unique=True, sparse=True)
        self._collection.create_index([("createdAt", DESCENDING)])
        logger.debug("Indexes ensured on %s", COLLECTION)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        raw = {
            "sessionId": order.session_id,
            "items": [
                {
                    "productId": item.product_id,
                    "productName": item.product_name,
                    "selectedVariantItemIds": list(item.selected_variant_item_ids),
                    "variantName": item.variant_name,
                    "productImage": item.product_image,
                    "quantity": item.quantity.value,
                    "unitPrice": money_to_raw(item.unit_price),
                }
                for item in order.items
            ],
            "totalAmount": money_to_raw(order.total_amount),
            "currency": order.currency,
            "status": order.status.value,
            "stockIssues": [
                {
                    "productId": issue.product_id,
                    "variantKey": issue.variant_key,
                    "requested": issue.requested,
                    "available": issue.available,
                    "code": issue.code,
                }
                for issue in order.stock_issues
            ],
            "createdAt": order.created_at,
            "updatedAt": order.updated_at,
        }
        # Left out rather than null so the sparse unique index skips it.
        if order.payment_session_id is not None:
            raw["paymentSessionId"] = order.payment_session_id
        return raw

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency") or DEFAULT_CURRENCY
        now = datetime.now(timezone.utc)
        return Order(
            id=str(raw["_id"]),
            session_id=raw["sessionId"],
            items=[
                OrderItem(
                    product_id=item["productId"],
                    product_name=item.get("productName", item["productId"]),
                    selected_variant_item_ids=tuple(item.get("selectedVariantItemIds", [])),
                    quantity=Quantity(int(item["quantity"])),
                    unit_price=money_from_raw(item.get("unitPrice", 0), currency),
                    variant_name=item.get("variantName"),
                    product_image=item.get("productImage"),
                )
                for item in raw.get("items", [])
            ],
            total_amount=money_from_raw(raw.get("totalAmount", 0), currency),
            status=OrderStatus(raw.get("status", OrderStatus.PENDING.value)),
            payment_session_id=raw.get("paymentSessionId"),
            stock_issues=[
                StockIssue(
                    product_id=issue["productId"],
                    variant_key=issue["variantKey"],
                    requested=issue["requested"],
                    code=issue["code"],
                    available=issue.get("available"),
                )
                for issue in raw.get("stockIssues", [])
            ],
            created_at=raw.get("createdAt", now),
            updated_at=raw.get("updatedAt", now),
        )
