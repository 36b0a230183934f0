"""Cart aggregate.

One cart per storefront session; a logged-in user's cart also carries
the user id. Lines are keyed by product id plus the normalised set of
selected variant item ids.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockroom.domain.exceptions import EntityNotFoundError, ValidationError
from stockroom.domain.model.product import InstallationOption
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY, Money
from stockroom.domain.model.variant import variant_combination_key


def normalize_variant_item_ids(item_ids: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Drop blanks and duplicates, then sort."""
    return tuple(sorted({item_id for item_id in item_ids if item_id}))


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CartLineItem:
    product_id: str
    selected_variant_item_ids: tuple[str, ...]
    quantity: int
    unit_price: Money  # snapshot, refreshed whenever the line changes
    installation_option: InstallationOption = InstallationOption.NONE
    installation_add_on_price: Money | None = None
    installation_location_id: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def variant_key(self) -> str:
        return variant_combination_key(self.selected_variant_item_ids)

    @property
    def line_total(self) -> Money:
        unit = self.unit_price
        if self.installation_add_on_price is not None:
            unit = unit + self.installation_add_on_price
        return unit * self.quantity

    def matches(self, product_id: str, selected_variant_item_ids: tuple[str, ...]) -> bool:
        return (
            self.product_id == product_id
            and self.selected_variant_item_ids == selected_variant_item_ids
        )


@dataclass
class Cart:
    id: str | None
    session_id: str
    items: list[CartLineItem] = field(default_factory=list)
    user_id: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Line operations ------------------------------------------------------

    def find_item(
        self, product_id: str, selected_variant_item_ids: list[str] | tuple[str, ...]
    ) -> CartLineItem | None:
        normalized = normalize_variant_item_ids(selected_variant_item_ids)
        for item in self.items:
            if item.matches(product_id, normalized):
                return item
        return None

    def add_item(self, line: CartLineItem) -> CartLineItem:
        """Add a line, or grow the matching line and refresh its prices."""
        if line.quantity <= 0:
            raise ValidationError("Quantity must be positive", code="INVALID_QUANTITY")
        line.selected_variant_item_ids = normalize_variant_item_ids(
            line.selected_variant_item_ids
        )
        existing = self.find_item(line.product_id, line.selected_variant_item_ids)
        if existing is None:
            self.items.append(line)
            self.touch()
            return line

        existing.quantity += line.quantity
        existing.unit_price = line.unit_price
        existing.installation_option = line.installation_option
        existing.installation_add_on_price = line.installation_add_on_price
        existing.installation_location_id = line.installation_location_id
        existing.updated_at = _now()
        self.touch()
        return existing

    def update_quantity(
        self,
        product_id: str,
        selected_variant_item_ids: list[str] | tuple[str, ...],
        quantity: int,
        unit_price: Money | None = None,
    ) -> None:
        """Set a line's quantity; zero or less removes the line."""
        item = self.find_item(product_id, selected_variant_item_ids)
        if item is None:
            raise EntityNotFoundError(
                f"Cart item for product '{product_id}' not found",
                code="CART_ITEM_NOT_FOUND",
            )
        if quantity <= 0:
            self.items.remove(item)
        else:
            item.quantity = quantity
            if unit_price is not None:
                item.unit_price = unit_price
            item.updated_at = _now()
        self.touch()

    def remove_item(
        self, product_id: str, selected_variant_item_ids: list[str] | tuple[str, ...]
    ) -> None:
        item = self.find_item(product_id, selected_variant_item_ids)
        if item is not None:
            self.items.remove(item)
        self.touch()

    def clear(self) -> None:
        self.items = []
        self.touch()

    def absorb(self, other: Cart) -> None:
        """Merge another cart's lines into this one, summing matching lines."""
        for guest_item in other.items:
            existing = self.find_item(guest_item.product_id, guest_item.selected_variant_item_ids)
            if existing is not None:
                existing.quantity += guest_item.quantity
                existing.updated_at = _now()
            else:
                self.items.append(guest_item)
        self.touch()

    # --- Totals ---------------------------------------------------------------

    @property
    def subtotal(self) -> Money:
        currency = self.items[0].unit_price.currency if self.items else DEFAULT_CURRENCY
        total = Money.zero(currency)
        for item in self.items:
            total = total + item.line_total
        return total

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def touch(self) -> None:
        self.updated_at = _now()
