"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the Mongo repositories
but keep everything in a dict. No database, no side effects. The product
fake stores and hands out copies, and every write holds a lock for its
whole check-and-write like the single-document update it stands in for.
"""

from __future__ import annotations

import itertools
import threading
from copy import deepcopy
from dataclasses import replace
from typing import Iterable

from stockroom.domain.exceptions import InvalidIdError
from stockroom.domain.model.cart import Cart
from stockroom.domain.model.order import Order
from stockroom.domain.model.product import Product, ProductImage
from stockroom.domain.model.stock import VariantStock
from stockroom.domain.model.variant import VariantType
from stockroom.domain.model.wishlist import Wishlist
from stockroom.domain.repository.cart_repository import CartRepository
from stockroom.domain.repository.order_repository import OrderRepository
from stockroom.domain.repository.product_repository import UPDATABLE_FIELDS, ProductRepository
from stockroom.domain.repository.variant_type_repository import VariantTypeRepository
from stockroom.domain.repository.wishlist_repository import WishlistRepository

_ids = itertools.count(1)


def _next_id() -> str:
    return f"{next(_ids):024x}"


class FakeProductRepository(ProductRepository):
    """Keeps private copies, so a handler's read goes stale like a real one."""

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        self._lock = threading.Lock()
        self.decrement_calls = 0
        for p in products or []:
            self.add(p)

    def get_by_id(self, product_id: str) -> Product | None:
        if not product_id or " " in product_id:
            raise InvalidIdError(f"Invalid product id: '{product_id}'")
        with self._lock:
            product = self._store.get(product_id)
            return deepcopy(product) if product is not None else None

    def list_page(
        self,
        page: int,
        limit: int,
        sub_category_id: str | None = None,
    ) -> tuple[list[Product], int]:
        with self._lock:
            products = [
                deepcopy(p) for p in self._store.values()
                if sub_category_id is None or sub_category_id in p.sub_category_ids
            ]
        products.sort(key=lambda p: p.created_at, reverse=True)
        start = (page - 1) * limit
        return products[start:start + limit], len(products)

    def add(self, product: Product) -> None:
        if product.id is None:
            product.id = _next_id()
        with self._lock:
            self._store[product.id] = deepcopy(product)

    def update_fields(self, product: Product, fields: Iterable[str]) -> bool:
        with self._lock:
            stored = self._store.get(product.id)
            if stored is None:
                return False
            for name in fields:
                if name not in UPDATABLE_FIELDS:
                    raise ValueError(f"Product field '{name}' cannot be updated")
                setattr(stored, name, deepcopy(getattr(product, name)))
            stored.updated_at = product.updated_at
            return True

    def add_images(self, product_id: str, images: list[ProductImage]) -> bool:
        with self._lock:
            stored = self._store.get(product_id)
            if stored is None:
                return False
            stored.images.extend(images)
            return True

    def remove_image(self, product_id: str, image_id: str) -> bool:
        with self._lock:
            stored = self._store.get(product_id)
            if stored is None:
                return False
            stored.images = [image for image in stored.images if image.id != image_id]
            return True

    def set_stock_entry(self, product_id: str, entry: VariantStock) -> bool:
        with self._lock:
            stored = self._store.get(product_id)
            if stored is None:
                return False
            for i, existing in enumerate(stored.variant_stock):
                if existing.combination_key == entry.combination_key:
                    stored.variant_stock[i] = entry
                    break
            else:
                stored.variant_stock.append(entry)
            return True

    def delete(self, product_id: str) -> bool:
        with self._lock:
            return self._store.pop(product_id, None) is not None

    def decrement_stock(self, product_id: str, combination_key: str, quantity: int) -> bool:
        with self._lock:
            self.decrement_calls += 1
            product = self._store.get(product_id)
            if product is None:
                return False
            for i, entry in enumerate(product.variant_stock):
                if entry.combination_key == combination_key and entry.stock_count >= quantity:
                    product.variant_stock[i] = replace(
                        entry, stock_count=entry.stock_count - quantity
                    )
                    return True
            return False


class FakeVariantTypeRepository(VariantTypeRepository):

    def __init__(self, variant_types: list[VariantType] | None = None) -> None:
        self._store: dict[str, VariantType] = {}
        for vt in variant_types or []:
            self.save(vt)

    def get_by_id(self, variant_type_id: str) -> VariantType | None:
        return self._store.get(variant_type_id)

    def get_by_name(self, name: str) -> VariantType | None:
        for vt in self._store.values():
            if vt.name.lower() == name.lower():
                return vt
        return None

    def list_all(self) -> list[VariantType]:
        return list(self._store.values())

    def save(self, variant_type: VariantType) -> None:
        if variant_type.id is None:
            variant_type.id = _next_id()
        self._store[variant_type.id] = variant_type

    def delete(self, variant_type_id: str) -> bool:
        return self._store.pop(variant_type_id, None) is not None


class FakeCartRepository(CartRepository):

    def __init__(self, carts: list[Cart] | None = None) -> None:
        self._store: dict[str, Cart] = {}
        for cart in carts or []:
            self.save(cart)

    def get_by_session_id(self, session_id: str) -> Cart | None:
        for cart in self._store.values():
            if cart.session_id == session_id:
                return cart
        return None

    def get_by_user_id(self, user_id: str) -> Cart | None:
        for cart in self._store.values():
            if cart.user_id == user_id:
                return cart
        return None

    def save(self, cart: Cart) -> None:
        if cart.id is None:
            cart.id = _next_id()
        self._store[cart.id] = cart

    def delete(self, cart: Cart) -> None:
        if cart.id is not None:
            self._store.pop(cart.id, None)

    def count(self) -> int:
        return len(self._store)


class FakeWishlistRepository(WishlistRepository):

    def __init__(self) -> None:
        self._store: dict[str, Wishlist] = {}

    def get_by_session_id(self, session_id: str) -> Wishlist | None:
        return self._store.get(session_id)

    def save(self, wishlist: Wishlist) -> None:
        if wishlist.id is None:
            wishlist.id = _next_id()
        self._store[wishlist.session_id] = wishlist


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}
        self.save_calls = 0

    def get_by_id(self, order_id: str) -> Order | None:
        return self._store.get(order_id)

    def get_by_payment_session_id(self, payment_session_id: str) -> Order | None:
        for order in self._store.values():
            if order.payment_session_id == payment_session_id:
                return order
        return None

    def list_by_session_id(self, session_id: str) -> list[Order]:
        return [o for o in self._store.values() if o.session_id == session_id]

    def save(self, order: Order) -> None:
        self.save_calls += 1
        if order.id is None:
            order.id = _next_id()
        self._store[order.id] = order
