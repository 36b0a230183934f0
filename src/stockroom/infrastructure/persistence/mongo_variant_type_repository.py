"""MongoDB-backed implementation of VariantTypeRepository."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pymongo import ASCENDING
from pymongo.database import Database

from stockroom.domain.model.variant import VariantItem, VariantType
from stockroom.domain.repository.variant_type_repository import VariantTypeRepository
from stockroom.infrastructure.persistence.documents import to_object_id

COLLECTION = "variant_types"


class MongoVariantTypeRepository(VariantTypeRepository):

    def __init__(self, db: Database) -> None:
        self._collection = db[COLLECTION]

    def get_by_id(self, variant_type_id: str) -> VariantType | None:
        raw = self._collection.find_one({"_id": to_object_id(variant_type_id, "variant type id")})
        return self._to_domain(raw) if raw is not None else None

    def get_by_name(self, name: str) -> VariantType | None:
        # Names are unique regardless of case.
        raw = self._collection.find_one(
            {"name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}}
        )
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[VariantType]:
        return [self._to_domain(raw) for raw in self._collection.find().sort("name", ASCENDING)]

    def save(self, variant_type: VariantType) -> None:
        raw = {
            "name": variant_type.name,
            "items": [{"id": item.id, "name": item.name} for item in variant_type.items],
            "createdAt": variant_type.created_at,
            "updatedAt": variant_type.updated_at,
        }
        if variant_type.id is None:
            result = self._collection.insert_one(raw)
            variant_type.id = str(result.inserted_id)
        else:
            self._collection.replace_one(
                {"_id": to_object_id(variant_type.id, "variant type id")}, raw
            )

    def delete(self, variant_type_id: str) -> bool:
        result = self._collection.delete_one(
            {"_id": to_object_id(variant_type_id, "variant type id")}
        )
        return result.deleted_count == 1

    @staticmethod
    def _to_domain(raw: dict) -> VariantType:
        now = datetime.now(timezone.utc)
        return VariantType(
            id=str(raw["_id"]),
            name=raw["name"],
            items=[VariantItem(id=i["id"], name=i.get("name", "")) for i in raw.get("items", [])],
            created_at=raw.get("createdAt", now),
            updated_at=raw.get("updatedAt", now),
        )
