"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. One MongoClient is
shared by every repository in the process.
"""

from __future__ import annotations

from functools import lru_cache

from pymongo import MongoClient
from pymongo.database import Database

from stockroom.domain.service.variant_stock_service import VariantStockService
from stockroom.infrastructure.config import get_settings
from stockroom.infrastructure.persistence.mongo_cart_repository import MongoCartRepository
from stockroom.infrastructure.persistence.mongo_order_repository import MongoOrderRepository
from stockroom.infrastructure.persistence.mongo_product_repository import (
    MongoProductRepository,
)
from stockroom.infrastructure.persistence.mongo_variant_type_repository import (
    MongoVariantTypeRepository,
)
from stockroom.infrastructure.persistence.mongo_wishlist_repository import (
    MongoWishlistRepository,
)


@lru_cache
def mongo_client() -> MongoClient:
    settings = get_settings()
    return MongoClient(
        settings.MONGODB_URI,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
        connectTimeoutMS=settings.MONGO_TIMEOUT_MS,
        socketTimeoutMS=settings.MONGO_TIMEOUT_MS,
    )


def database() -> Database:
    return mongo_client()[get_settings().DB_NAME]


def product_repository() -> MongoProductRepository:
    return MongoProductRepository(database())


def variant_type_repository() -> MongoVariantTypeRepository:
    return MongoVariantTypeRepository(database())


def cart_repository() -> MongoCartRepository:
    return MongoCartRepository(database())


def wishlist_repository() -> MongoWishlistRepository:
    return MongoWishlistRepository(database())


def order_repository() -> MongoOrderRepository:
    return MongoOrderRepository(database())


def stock_service() -> VariantStockService:
    return VariantStockService(product_repository())
