"""Variant stock ledger entries and derived stock status."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Sequence

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.value_objects import Money


class StockStatus(Enum):
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    PARTIAL_STOCK_OUT = "PARTIAL_STOCK_OUT"


@dataclass(frozen=True)
class VariantStock:
    """Stock and optional price override for one variant combination.

    ``price`` is a full price for the combination and wins over
    ``price_delta``, which is kept for documents written before full
    prices existed.
    """

    combination_key: str
    stock_count: int
    price: Money | None = None
    price_delta: Decimal | None = None

    def __post_init__(self) -> None:
        if isinstance(self.stock_count, bool) or not isinstance(self.stock_count, int):
            raise ValidationError("Stock count must be an integer")
        if self.stock_count < 0:
            raise ValidationError("Stock count must be non-negative")
        if not self.combination_key:
            raise ValidationError("Variant combination key is required")


@dataclass(frozen=True)
class StockInfo:
    total_stock: int
    status: StockStatus


def get_product_stock_info(entries: Sequence[VariantStock]) -> StockInfo:
    """Summarise a ledger.

    Recomputed on every read; nothing about the status is stored.
    An empty ledger means the product is untracked and always purchasable.
    """
    if not entries:
        return StockInfo(total_stock=0, status=StockStatus.IN_STOCK)

    total = sum(entry.stock_count for entry in entries)
    if total == 0:
        return StockInfo(total_stock=0, status=StockStatus.OUT_OF_STOCK)
    if any(entry.stock_count == 0 for entry in entries):
        return StockInfo(total_stock=total, status=StockStatus.PARTIAL_STOCK_OUT)
    return StockInfo(total_stock=total, status=StockStatus.IN_STOCK)


@dataclass(frozen=True)
class InsufficientItem:
    product_id: str
    variant_key: str
    requested: int
    available: int


@dataclass(frozen=True)
class StockAvailability:
    available: bool
    insufficient_items: list[InsufficientItem]


@dataclass(frozen=True)
class StockRequest:
    """One line of a batch availability check."""

    product_id: str
    selected_variant_item_ids: tuple[str, ...]
    quantity: int
