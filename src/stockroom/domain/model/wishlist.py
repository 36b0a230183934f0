"""Wishlist aggregate: products a session wants to remember, without quantities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockroom.domain.model.cart import normalize_variant_item_ids


@dataclass(frozen=True)
class WishlistItem:
    product_id: str
    selected_variant_item_ids: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Wishlist:
    id: str | None
    session_id: str
    items: list[WishlistItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def contains(self, product_id: str, selected_variant_item_ids: list[str] | tuple[str, ...]) -> bool:
        normalized = normalize_variant_item_ids(selected_variant_item_ids)
        return any(
            item.product_id == product_id and item.selected_variant_item_ids == normalized
            for item in self.items
        )

    def add(self, product_id: str, selected_variant_item_ids: list[str] | tuple[str, ...]) -> None:
        """Add a line; an identical line already present is left alone."""
        if self.contains(product_id, selected_variant_item_ids):
            return
        self.items.append(
            WishlistItem(
                product_id=product_id,
                selected_variant_item_ids=normalize_variant_item_ids(selected_variant_item_ids),
            )
        )
        self.touch()

    def remove(self, product_id: str, selected_variant_item_ids: list[str] | tuple[str, ...]) -> None:
        normalized = normalize_variant_item_ids(selected_variant_item_ids)
        self.items = [
            item
            for item in self.items
            if not (item.product_id == product_id and item.selected_variant_item_ids == normalized)
        ]
        self.touch()

    def clear(self) -> None:
        self.items = []
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
