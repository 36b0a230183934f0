"""Application service: Set Variant Stock use case (admin stock edit)."""

from __future__ import annotations

from decimal import Decimal

from stockroom.domain.exceptions import ProductNotFoundError
from stockroom.domain.model.stock import VariantStock
from stockroom.domain.model.value_objects import Money
from stockroom.domain.model.variant import variant_combination_key
from stockroom.domain.repository.product_repository import ProductRepository


class SetVariantStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        selected_variant_item_ids: list[str],
        stock_count: int,
        price: Decimal | None = None,
        price_delta: Decimal | None = None,
    ) -> VariantStock:
        """Set the count (and optionally the price) of one combination.

        The ledger entry is created when missing. Keys that do not match
        the product's variants are rejected.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        entry = VariantStock(
            combination_key=variant_combination_key(selected_variant_item_ids),
            stock_count=stock_count,
            price=Money.of(price, product.base_price.currency) if price is not None else None,
            price_delta=price_delta,
        )
        product.upsert_stock_entry(entry)
        if not self._product_repo.set_stock_entry(product_id, entry):
            raise ProductNotFoundError(product_id)
        return entry
