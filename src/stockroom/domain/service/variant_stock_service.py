"""Domain service: variant stock lookup, reservation and batch validation.

Checkout is two-phase. ``validate_stock_availability`` is an advisory
read used before payment; it takes no locks. The authoritative step is
``reduce_variant_stock``, a single conditional decrement performed when
the order is fulfilled. Stock can change between the two.

A combination with no ledger entry is untracked. The availability
and reservation paths treat it as unlimited, including on products
that track some other combinations, while ``get_variant_stock`` reports
a count of 0 for it.
"""

from __future__ import annotations

import logging
from typing import Iterable

from stockroom.domain.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)
from stockroom.domain.model.product import Product
from stockroom.domain.model.stock import (
    InsufficientItem,
    StockAvailability,
    StockRequest,
)
from stockroom.domain.model.variant import variant_combination_key
from stockroom.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class VariantStockService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def get_product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def get_variant_stock(self, product_id: str, selected_variant_item_ids: Iterable[str]) -> int:
        """Stock count for one combination.

        0 when the combination has no ledger entry; use
        ``Product.tracks_combination`` to tell that apart from sold out.
        """
        product = self.get_product(product_id)
        return product.stock_for(tuple(selected_variant_item_ids))

    def reduce_variant_stock(
        self,
        product_id: str,
        selected_variant_item_ids: Iterable[str],
        quantity: int,
    ) -> None:
        """Take ``quantity`` units from a combination's ledger entry.

        Raises ProductNotFoundError, InsufficientStockError, or
        InvalidIdError (from the repository) on a malformed id. An
        untracked combination succeeds without touching anything.
        """
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", code="INVALID_QUANTITY")

        key = variant_combination_key(tuple(selected_variant_item_ids))

        if self._product_repo.decrement_stock(product_id, key, quantity):
            logger.info("Reduced stock of product %s (%s) by %d", product_id, key, quantity)
            return

        # The guarded update matched nothing; work out why.
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        entry = product.stock_entry_for(key)
        if entry is None:
            logger.warning("No stock tracking for product %s variant %s", product_id, key)
            return

        raise InsufficientStockError(
            product_id=product_id,
            variant_key=key,
            requested=quantity,
            available=entry.stock_count,
        )

    def validate_stock_availability(self, items: Iterable[StockRequest]) -> StockAvailability:
        """Check every requested line against the ledger.

        Each line is judged on its own. A product that cannot be loaded,
        for any reason, counts as a shortfall with nothing available.
        """
        insufficient: list[InsufficientItem] = []

        for item in items:
            key = variant_combination_key(item.selected_variant_item_ids)
            try:
                product = self.get_product(item.product_id)
            except Exception as exc:
                logger.error(
                    "Error validating stock for product %s: %s", item.product_id, exc
                )
                insufficient.append(
                    InsufficientItem(
                        product_id=item.product_id,
                        variant_key=key,
                        requested=item.quantity,
                        available=0,
                    )
                )
                continue

            entry = product.stock_entry_for(key)
            if entry is not None and entry.stock_count < item.quantity:
                insufficient.append(
                    InsufficientItem(
                        product_id=item.product_id,
                        variant_key=key,
                        requested=item.quantity,
                        available=entry.stock_count,
                    )
                )

        return StockAvailability(
            available=not insufficient,
            insufficient_items=insufficient,
        )
