"""Product aggregate.

The product owns its images, its variant selections and its stock
ledger (``variant_stock``). Every ledger mutation other than the atomic
checkout decrement goes through this class.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from stockroom.domain.exceptions import EntityNotFoundError, ValidationError
from stockroom.domain.model.stock import (
    StockInfo,
    VariantStock,
    get_product_stock_info,
)
from stockroom.domain.model.value_objects import Money
from stockroom.domain.model.variant import (
    DEFAULT_COMBINATION_KEY,
    KEY_SEPARATOR,
    ProductVariant,
    VariantCombination,
    generate_all_variant_combinations,
    variant_combination_key,
)


class InstallationOption(Enum):
    NONE = "none"
    IN_STORE = "in_store"
    AT_HOME = "at_home"


@dataclass(frozen=True)
class InstallationLocation:
    location_id: str
    name: str
    price_delta: Money
    enabled: bool = True


@dataclass(frozen=True)
class InstallationService:
    enabled: bool = False
    in_store_price: Money | None = None
    at_home_price: Money | None = None
    available_locations: tuple[InstallationLocation, ...] = ()


@dataclass(frozen=True)
class ProductImage:
    """An image, optionally restricted to some variant items or combinations.

    An empty ``mapped_variants`` means the image applies to every
    combination.
    """

    id: str
    url: str
    mapped_variants: tuple[str, ...] = ()
    order: int = 0

    def matches(self, selected_item_ids: list[str] | tuple[str, ...]) -> bool:
        if not self.mapped_variants:
            return True
        selected = set(selected_item_ids)
        for mapped in self.mapped_variants:
            if mapped in selected:
                return True
            if all(part in selected for part in mapped.split(KEY_SEPARATOR)):
                return True
        return False


@dataclass
class Product:
    """A catalog product.

    Use ``Product.create()`` for new products; ``__init__`` stays plain
    so repositories can reconstitute stored documents without
    re-validating them.
    """

    id: str | None
    name: str
    base_price: Money
    offer_percentage: Decimal | None = None
    description: str | None = None
    images: list[ProductImage] = field(default_factory=list)
    variants: list[ProductVariant] = field(default_factory=list)
    variant_stock: list[VariantStock] = field(default_factory=list)
    installation_service: InstallationService | None = None
    sub_category_ids: list[str] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        name: str,
        base_price: Money,
        offer_percentage: Decimal | None = None,
        variants: list[ProductVariant] | None = None,
        variant_stock: list[VariantStock] | None = None,
        max_combinations: int | None = None,
        **attrs,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        product = Product(
            id=None,
            name=name.strip(),
            base_price=base_price,
            variants=list(variants or []),
            **attrs,
        )
        product.set_offer_percentage(offer_percentage)
        product.set_variant_stock(variant_stock or [], max_combinations)
        return product

    # --- Pricing --------------------------------------------------------------

    def set_offer_percentage(self, percentage: Decimal | None) -> None:
        if percentage is not None and not (Decimal("0") <= percentage < Decimal("100")):
            raise ValidationError(
                "Offer percentage must be at least 0 and below 100",
                code="INVALID_OFFER_PERCENTAGE",
            )
        self.offer_percentage = percentage

    @property
    def effective_base_price(self) -> Money:
        if self.offer_percentage:
            return self.base_price.percent_off(self.offer_percentage)
        return self.base_price

    def unit_price_for(self, selected_item_ids: list[str] | tuple[str, ...]) -> Money:
        """Price of one unit of the selected combination.

        A ledger ``price`` replaces the base price; otherwise a
        ``price_delta`` is added to the discounted base.
        """
        entry = self.stock_entry_for(variant_combination_key(selected_item_ids))
        if entry is None:
            return self.effective_base_price
        if entry.price is not None:
            return entry.price
        base = self.effective_base_price
        if entry.price_delta is not None:
            return Money(base.amount + entry.price_delta, base.currency)
        return base

    def installation_add_on_price(
        self,
        option: InstallationOption,
        location_id: str | None = None,
    ) -> Money:
        if option is InstallationOption.NONE:
            return Money.zero(self.base_price.currency)

        service = self.installation_service
        if service is None or not service.enabled:
            raise ValidationError(
                f"Installation is not offered for '{self.name}'",
                code="INSTALLATION_UNAVAILABLE",
            )

        if option is InstallationOption.IN_STORE:
            if service.in_store_price is None:
                raise ValidationError(
                    "In-store installation has no price", code="INSTALLATION_UNAVAILABLE"
                )
            return service.in_store_price

        if service.at_home_price is None:
            raise ValidationError(
                "At-home installation has no price", code="INSTALLATION_UNAVAILABLE"
            )
        if location_id is None:
            return service.at_home_price
        for location in service.available_locations:
            if location.location_id == location_id and location.enabled:
                return service.at_home_price + location.price_delta
        raise ValidationError(
            f"Installation location '{location_id}' is not available",
            code="INSTALLATION_LOCATION_UNAVAILABLE",
        )

    # --- Stock ledger ---------------------------------------------------------

    @property
    def has_stock_tracking(self) -> bool:
        return bool(self.variant_stock)

    def stock_entry_for(self, combination_key: str) -> VariantStock | None:
        for entry in self.variant_stock:
            if entry.combination_key == combination_key:
                return entry
        return None

    def tracks_combination(self, combination_key: str) -> bool:
        return self.stock_entry_for(combination_key) is not None

    def stock_for(self, selected_item_ids: list[str] | tuple[str, ...]) -> int:
        """Stock count of a combination; 0 when it has no ledger entry."""
        entry = self.stock_entry_for(variant_combination_key(selected_item_ids))
        return entry.stock_count if entry is not None else 0

    def stock_info(self) -> StockInfo:
        return get_product_stock_info(self.variant_stock)

    def is_in_stock(self) -> bool:
        """Untracked products are always in stock; tracked ones need one unit somewhere."""
        if not self.has_stock_tracking:
            return True
        return any(entry.stock_count > 0 for entry in self.variant_stock)

    def combinations(self, max_combinations: int | None = None) -> list[VariantCombination]:
        return generate_all_variant_combinations(self.variants, max_combinations)

    def set_variant_stock(
        self,
        entries: list[VariantStock],
        max_combinations: int | None = None,
    ) -> None:
        """Replace the whole ledger after checking every key against the variants."""
        if max_combinations is not None:
            self.combinations(max_combinations)

        seen: set[str] = set()
        for entry in entries:
            if entry.combination_key in seen:
                raise ValidationError(
                    f"Duplicate stock entry for '{entry.combination_key}'",
                    code="DUPLICATE_VARIANT_STOCK",
                )
            seen.add(entry.combination_key)
            self._check_combination_key(entry.combination_key)

        self.variant_stock = list(entries)
        self.touch()

    def upsert_stock_entry(self, entry: VariantStock) -> None:
        self._check_combination_key(entry.combination_key)
        for i, existing in enumerate(self.variant_stock):
            if existing.combination_key == entry.combination_key:
                self.variant_stock[i] = entry
                break
        else:
            self.variant_stock.append(entry)
        self.touch()

    def _check_combination_key(self, combination_key: str) -> None:
        if not self.variants:
            if combination_key != DEFAULT_COMBINATION_KEY:
                raise ValidationError(
                    f"Product without variants only accepts the "
                    f"'{DEFAULT_COMBINATION_KEY}' stock key, got '{combination_key}'",
                    code="INVALID_VARIANT_COMBINATION",
                )
            return

        declared = {item_id for variant in self.variants for item_id in variant.item_ids()}
        parts = combination_key.split(KEY_SEPARATOR)
        if len(parts) != len(set(parts)) or not set(parts) <= declared:
            raise ValidationError(
                f"Stock key '{combination_key}' does not match the product's variants",
                code="INVALID_VARIANT_COMBINATION",
            )

    # --- Images ---------------------------------------------------------------

    def add_images(self, images: list[ProductImage]) -> None:
        self.images.extend(images)
        self.touch()

    def remove_image(self, image_id: str) -> ProductImage:
        for image in self.images:
            if image.id == image_id:
                self.images.remove(image)
                self.touch()
                return image
        raise EntityNotFoundError(
            f"Image '{image_id}' not found on product '{self.name}'",
            code="IMAGE_NOT_FOUND",
        )

    def map_images(self, mappings: dict[str, list[str]]) -> None:
        """Attach images to variant items.

        A mapping with several item ids is stored as one combination key;
        a single id is stored as is; an empty list clears the mapping.
        """
        updated: list[ProductImage] = []
        for image in self.images:
            if image.id not in mappings:
                updated.append(image)
                continue
            item_ids = mappings[image.id]
            if len(item_ids) > 1:
                mapped = (KEY_SEPARATOR.join(sorted(item_ids)),)
            else:
                mapped = tuple(item_ids)
            updated.append(replace(image, mapped_variants=mapped))
        self.images = updated
        self.touch()

    def images_for_variants(self, selected_item_ids: list[str] | tuple[str, ...]) -> list[ProductImage]:
        matching = [image for image in self.images if image.matches(selected_item_ids)]
        return sorted(matching, key=lambda image: image.order)

    def variant_label(self, selected_item_ids: list[str] | tuple[str, ...]) -> str | None:
        """Human label (``"Color: Red, Size: L"``) for a selection, or None without variants."""
        if not self.variants:
            return None
        selected = set(selected_item_ids)
        labels = [
            f"{variant.variant_type_name}: {item.name}"
            for variant in self.variants
            for item in variant.selected_items
            if item.id in selected
        ]
        return ", ".join(labels) or None

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
