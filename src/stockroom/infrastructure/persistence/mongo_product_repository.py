"""MongoDB-backed implementation of ProductRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from stockroom.domain.model.product import (
    InstallationLocation,
    InstallationService,
    Product,
    ProductImage,
)
from stockroom.domain.model.stock import VariantStock
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY
from stockroom.domain.model.variant import ProductVariant, VariantItem
from stockroom.domain.repository.product_repository import UPDATABLE_FIELDS, ProductRepository
from stockroom.infrastructure.persistence.documents import (
    decimal_from_raw,
    decimal_to_raw,
    money_from_raw,
    money_to_raw,
    to_object_id,
)

COLLECTION = "products"

# Document keys written for each updatable Product attribute.
_DOCUMENT_KEYS = {
    "name": ("name",),
    "description": ("description",),
    "base_price": ("basePrice", "currency"),
    "offer_percentage": ("offerPercentage",),
    "images": ("images",),
    "variants": ("variants",),
    "variant_stock": ("variantStock",),
    "installation_service": ("installationService",),
    "sub_category_ids": ("subCategoryIds",),
    "highlights": ("highlights",),
}


def _image_to_raw(image: ProductImage) -> dict:
    return {
        "id": image.id,
        "url": image.url,
        "mappedVariants": list(image.mapped_variants),
        "order": image.order,
    }


def _stock_to_raw(entry: VariantStock) -> dict:
    return {
        "variantCombinationKey": entry.combination_key,
        "stockCount": entry.stock_count,
        "price": money_to_raw(entry.price),
        "priceDelta": decimal_to_raw(entry.price_delta),
    }


class MongoProductRepository(ProductRepository):

    def __init__(self, db: Database) -> None:
        self._collection = db[COLLECTION]

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        raw = self._collection.find_one({"_id": to_object_id(product_id, "product id")})
        return self._to_domain(raw) if raw is not None else None

    def list_page(
        self,
        page: int,
        limit: int,
        sub_category_id: str | None = None,
    ) -> tuple[list[Product], int]:
        query = {"subCategoryIds": sub_category_id} if sub_category_id else {}
        total = self._collection.count_documents(query)
        cursor = (
            self._collection.find(query)
            .sort("createdAt", DESCENDING)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        return [self._to_domain(raw) for raw in cursor], total

    def add(self, product: Product) -> None:
        result = self._collection.insert_one(self._to_raw(product))
        product.id = str(result.inserted_id)

    def update_fields(self, product: Product, fields: Iterable[str]) -> bool:
        raw = self._to_raw(product)
        changes: dict = {}
        for name in fields:
            if name not in UPDATABLE_FIELDS:
                raise ValueError(f"Product field '{name}' cannot be updated")
            for key in _DOCUMENT_KEYS[name]:
                changes[key] = raw[key]
        changes["updatedAt"] = product.updated_at
        result = self._collection.update_one(
            {"_id": to_object_id(product.id, "product id")},
            {"$set": changes},
        )
        return result.matched_count == 1

    def add_images(self, product_id: str, images: list[ProductImage]) -> bool:
        result = self._collection.update_one(
            {"_id": to_object_id(product_id, "product id")},
            {
                "$push": {"images": {"$each": [_image_to_raw(image) for image in images]}},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
        )
        return result.matched_count == 1

    def remove_image(self, product_id: str, image_id: str) -> bool:
        result = self._collection.update_one(
            {"_id": to_object_id(product_id, "product id")},
            {
                "$pull": {"images": {"id": image_id}},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
        )
        return result.matched_count == 1

    def set_stock_entry(self, product_id: str, entry: VariantStock) -> bool:
        oid = to_object_id(product_id, "product id")
        raw = _stock_to_raw(entry)
        if self._replace_stock_entry(oid, raw):
            return True

        # Append only while no entry carries the key.
        result = self._collection.update_one(
            {"_id": oid, "variantStock.variantCombinationKey": {"$ne": entry.combination_key}},
            {"$push": {"variantStock": raw}, "$set": {"updatedAt": datetime.now(timezone.utc)}},
        )
        if result.matched_count == 1:
            return True
        # The key was appended concurrently.
        return self._replace_stock_entry(oid, raw)

    def _replace_stock_entry(self, oid: ObjectId, raw: dict) -> bool:
        result = self._collection.update_one(
            {"_id": oid, "variantStock.variantCombinationKey": raw["variantCombinationKey"]},
            {"$set": {"variantStock.$": raw, "updatedAt": datetime.now(timezone.utc)}},
        )
        return result.matched_count == 1

    def delete(self, product_id: str) -> bool:
        result = self._collection.delete_one({"_id": to_object_id(product_id, "product id")})
        return result.deleted_count == 1

    def decrement_stock(self, product_id: str, combination_key: str, quantity: int) -> bool:
        # One conditional update: the entry must exist and hold enough units,
        # otherwise nothing is written.
        updated = self._collection.find_one_and_update(
            {
                "_id": to_object_id(product_id, "product id"),
                "variantStock": {
                    "$elemMatch": {
                        "variantCombinationKey": combination_key,
                        "stockCount": {"$gte": quantity},
                    }
                },
            },
            {
                "$inc": {"variantStock.$.stockCount": -quantity},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
        )
        return updated is not None

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        currency = product.base_price.currency
        service = product.installation_service
        return {
            "name": product.name,
            "description": product.description,
            "basePrice": money_to_raw(product.base_price),
            "offerPercentage": decimal_to_raw(product.offer_percentage),
            "currency": currency,
            "images": [_image_to_raw(image) for image in product.images],
            "variants": [
                {
                    "variantTypeId": variant.variant_type_id,
                    "variantTypeName": variant.variant_type_name,
                    "selectedItems": [
                        {"id": item.id, "name": item.name} for item in variant.selected_items
                    ],
                }
                for variant in product.variants
            ],
            "variantStock": [_stock_to_raw(entry) for entry in product.variant_stock],
            "installationService": (
                {
                    "enabled": service.enabled,
                    "inStorePrice": money_to_raw(service.in_store_price),
                    "atHomePrice": money_to_raw(service.at_home_price),
                    "availableLocations": [
                        {
                            "locationId": loc.location_id,
                            "name": loc.name,
                            "priceDelta": money_to_raw(loc.price_delta),
                            "enabled": loc.enabled,
                        }
                        for loc in service.available_locations
                    ],
                }
                if service is not None
                else None
            ),
            "subCategoryIds": list(product.sub_category_ids),
            "highlights": list(product.highlights),
            "createdAt": product.created_at,
            "updatedAt": product.updated_at,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency") or DEFAULT_CURRENCY
        service_raw = raw.get("installationService")
        service = None
        if service_raw:
            service = InstallationService(
                enabled=bool(service_raw.get("enabled", False)),
                in_store_price=money_from_raw(service_raw.get("inStorePrice"), currency),
                at_home_price=money_from_raw(service_raw.get("atHomePrice"), currency),
                available_locations=tuple(
                    InstallationLocation(
                        location_id=loc["locationId"],
                        name=loc.get("name", ""),
                        price_delta=money_from_raw(loc.get("priceDelta", 0), currency),
                        enabled=loc.get("enabled", True),
                    )
                    for loc in service_raw.get("availableLocations", [])
                ),
            )

        now = datetime.now(timezone.utc)
        return Product(
            id=str(raw["_id"]),
            name=raw["name"],
            base_price=money_from_raw(raw.get("basePrice", 0), currency),
            offer_percentage=decimal_from_raw(raw.get("offerPercentage")),
            description=raw.get("description"),
            images=[
                ProductImage(
                    id=img["id"],
                    url=img["url"],
                    mapped_variants=tuple(img.get("mappedVariants", [])),
                    order=img.get("order", index),
                )
                for index, img in enumerate(raw.get("images", []))
            ],
            variants=[
                ProductVariant(
                    variant_type_id=v["variantTypeId"],
                    variant_type_name=v.get("variantTypeName", ""),
                    selected_items=tuple(
                        VariantItem(id=i["id"], name=i.get("name", ""))
                        for i in v.get("selectedItems", [])
                    ),
                )
                for v in raw.get("variants", [])
            ],
            variant_stock=[
                VariantStock(
                    combination_key=s["variantCombinationKey"],
                    stock_count=int(s.get("stockCount", 0)),
                    price=money_from_raw(s.get("price"), currency),
                    price_delta=decimal_from_raw(s.get("priceDelta")),
                )
                for s in raw.get("variantStock", [])
            ],
            installation_service=service,
            sub_category_ids=list(raw.get("subCategoryIds", [])),
            highlights=list(raw.get("highlights", [])),
            created_at=raw.get("createdAt", now),
            updated_at=raw.get("updatedAt", now),
        )
