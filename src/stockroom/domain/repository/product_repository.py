"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. The MongoDB implementation lives in
``infrastructure.persistence``.

Existing products are never written back whole. Checkout decrements
stock concurrently with admin edits, so every write below touches only
the parts of the document it is about.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from stockroom.domain.model.product import Product, ProductImage
from stockroom.domain.model.stock import VariantStock

# Product attributes that ``update_fields`` may write.
UPDATABLE_FIELDS = frozenset({
    "name",
    "description",
    "base_price",
    "offer_percentage",
    "images",
    "variants",
    "variant_stock",
    "installation_service",
    "sub_category_ids",
    "highlights",
})


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found.

        Raises InvalidIdError when ``product_id`` is malformed.
        """

    @abstractmethod
    def list_page(
        self,
        page: int,
        limit: int,
        sub_category_id: str | None = None,
    ) -> tuple[list[Product], int]:
        """Return one page of products (newest first) and the total count."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert a new product and assign its ID."""

    @abstractmethod
    def update_fields(self, product: Product, fields: Iterable[str]) -> bool:
        """Write only the named attributes of ``product`` (and ``updated_at``).

        ``variant_stock`` belongs here only for an explicit ledger
        replacement. Returns False when the product no longer exists.
        """

    @abstractmethod
    def add_images(self, product_id: str, images: list[ProductImage]) -> bool:
        """Append images. Returns False when the product does not exist."""

    @abstractmethod
    def remove_image(self, product_id: str, image_id: str) -> bool:
        """Drop one image. Returns False when the product does not exist."""

    @abstractmethod
    def set_stock_entry(self, product_id: str, entry: VariantStock) -> bool:
        """Replace the ledger entry with the same key, or append it.

        Other entries are left as they are in the store. Returns False
        when the product does not exist.
        """

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False when nothing was deleted."""

    @abstractmethod
    def decrement_stock(self, product_id: str, combination_key: str, quantity: int) -> bool:
        """Atomically take ``quantity`` units from one ledger entry.

        The decrement happens only when the entry exists and holds at
        least ``quantity`` units, in a single conditional update that also
        refreshes ``updated_at``. Returns True when the update applied.
        """
