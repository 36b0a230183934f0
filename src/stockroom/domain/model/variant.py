"""Variant types and variant combinations.

A VariantType ("Color") owns an ordered list of VariantItems ("Red",
"Blue"). A product opts into a subset of each type's items through a
ProductVariant. The combination key is the join field between cart
lines, ledger entries and image mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from math import prod
from typing import Sequence

from stockroom.domain.exceptions import (
    CombinationLimitExceededError,
    ConflictError,
    ValidationError,
)

DEFAULT_COMBINATION_KEY = "default"
DEFAULT_COMBINATION_LABEL = "Default"
KEY_SEPARATOR = "+"


def variant_combination_key(item_ids: Sequence[str] | None) -> str:
    """Canonical key for a set of selected variant item ids.

    Ids are sorted and joined with ``+``; an empty selection is
    ``"default"``. Duplicates are kept, so ``["a", "a"]`` gives
    ``"a+a"``.
    """
    if not item_ids:
        return DEFAULT_COMBINATION_KEY
    return KEY_SEPARATOR.join(sorted(item_ids))


@dataclass(frozen=True)
class VariantItem:
    id: str
    name: str


@dataclass(frozen=True)
class ProductVariant:
    """A product's selection of items from one variant type."""

    variant_type_id: str
    variant_type_name: str
    selected_items: tuple[VariantItem, ...] = ()

    def item_ids(self) -> list[str]:
        return [item.id for item in self.selected_items]


@dataclass(frozen=True)
class VariantCombination:
    key: str
    label: str
    item_ids: tuple[str, ...]


def count_variant_combinations(variants: Sequence[ProductVariant]) -> int:
    if not variants:
        return 1
    return prod(len(v.selected_items) for v in variants)


def generate_all_variant_combinations(
    variants: Sequence[ProductVariant],
    max_combinations: int | None = None,
) -> list[VariantCombination]:
    """Expand variant selections into every concrete combination.

    Combinations follow declaration order; labels read
    ``"Color: Red, Size: L"`` while keys are sorted.

    Raises CombinationLimitExceededError when the cartesian product
    would exceed ``max_combinations``.
    """
    if not variants:
        return [
            VariantCombination(
                key=DEFAULT_COMBINATION_KEY,
                label=DEFAULT_COMBINATION_LABEL,
                item_ids=(),
            )
        ]

    if max_combinations is not None:
        total = count_variant_combinations(variants)
        if total > max_combinations:
            raise CombinationLimitExceededError(total, max_combinations)

    combinations: list[VariantCombination] = []

    def expand(index: int, ids: list[str], labels: list[str]) -> None:
        if index == len(variants):
            combinations.append(
                VariantCombination(
                    key=variant_combination_key(ids),
                    label=", ".join(labels),
                    item_ids=tuple(ids),
                )
            )
            return
        variant = variants[index]
        for item in variant.selected_items:
            expand(
                index + 1,
                [*ids, item.id],
                [*labels, f"{variant.variant_type_name}: {item.name}"],
            )

    expand(0, [], [])
    return combinations


@dataclass
class VariantType:
    """Catalog-level variant type, shared by many products."""

    id: str | None
    name: str
    items: list[VariantItem]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(name: str, items: list[VariantItem]) -> VariantType:
        if not name or not name.strip():
            raise ValidationError("Variant type name is required")
        if not items:
            raise ValidationError("At least one item is required")
        variant_type = VariantType(id=None, name=name.strip(), items=[])
        for item in items:
            variant_type.add_item(item)
        return variant_type

    def add_item(self, item: VariantItem) -> None:
        if not item.name or not item.name.strip():
            raise ValidationError("Item name is required")
        if any(existing.id == item.id for existing in self.items):
            raise ConflictError(
                f"Item '{item.id}' already exists on variant type '{self.name}'",
                code="VARIANT_ITEM_EXISTS",
            )
        self.items.append(item)
        self.touch()

    def remove_item(self, item_id: str) -> None:
        remaining = [item for item in self.items if item.id != item_id]
        if len(remaining) == len(self.items):
            raise ValidationError(
                f"Item '{item_id}' not found on variant type '{self.name}'",
                code="VARIANT_ITEM_NOT_FOUND",
            )
        self.items = remaining
        self.touch()

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Variant type name is required")
        self.name = name.strip()
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
