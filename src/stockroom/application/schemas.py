"""Input schemas for untrusted payloads.

Every payload that enters an application handler from the outside is
parsed with one of these pydantic models first. ``parse_input`` reports
all violations at once as a domain ValidationError with field-level
errors. Field names accept both snake_case and the camelCase used by
stored documents and storefront clients.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Literal, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stockroom.domain.exceptions import ValidationError
from stockroom.domain.model.product import (
    InstallationLocation,
    InstallationService,
    ProductImage,
)
from stockroom.domain.model.stock import VariantStock
from stockroom.domain.model.value_objects import Money
from stockroom.domain.model.variant import ProductVariant, VariantItem

ModelT = TypeVar("ModelT", bound=BaseModel)


def new_id() -> str:
    return uuid.uuid4().hex


def parse_input(model: type[ModelT], data: dict) -> ModelT:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        raise ValidationError(
            f"Invalid {model.__name__}: {len(errors)} error(s)", errors=errors
        ) from exc


class InputModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# --- Catalog ------------------------------------------------------------------


class VariantItemInput(InputModel):
    id: str | None = None
    name: str = Field(min_length=1)

    def to_domain(self) -> VariantItem:
        return VariantItem(id=self.id or new_id(), name=self.name.strip())


class SelectedItemInput(InputModel):
    id: str = Field(min_length=1)
    name: str


class ProductVariantInput(InputModel):
    variant_type_id: str
    variant_type_name: str
    selected_items: list[SelectedItemInput] = Field(default_factory=list)

    def to_domain(self) -> ProductVariant:
        return ProductVariant(
            variant_type_id=self.variant_type_id,
            variant_type_name=self.variant_type_name,
            selected_items=tuple(VariantItem(id=i.id, name=i.name) for i in self.selected_items),
        )


class VariantStockInput(InputModel):
    variant_combination_key: str = Field(min_length=1)
    stock_count: int = Field(ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    price_delta: Decimal | None = None

    def to_domain(self, currency: str) -> VariantStock:
        return VariantStock(
            combination_key=self.variant_combination_key,
            stock_count=self.stock_count,
            price=Money.of(self.price, currency) if self.price is not None else None,
            price_delta=self.price_delta,
        )


class ProductImageInput(InputModel):
    id: str | None = None
    url: str = Field(min_length=1)
    mapped_variants: list[str] = Field(default_factory=list)
    order: int | None = None

    def to_domain(self, default_order: int) -> ProductImage:
        return ProductImage(
            id=self.id or new_id(),
            url=self.url,
            mapped_variants=tuple(self.mapped_variants),
            order=self.order if self.order is not None else default_order,
        )


class InstallationLocationInput(InputModel):
    location_id: str
    name: str
    price_delta: Decimal = Field(ge=0)
    enabled: bool = True


class InstallationServiceInput(InputModel):
    enabled: bool = False
    in_store_price: Decimal | None = Field(default=None, ge=0)
    at_home_price: Decimal | None = Field(default=None, ge=0)
    available_locations: list[InstallationLocationInput] = Field(default_factory=list)

    def to_domain(self, currency: str) -> InstallationService:
        return InstallationService(
            enabled=self.enabled,
            in_store_price=(
                Money.of(self.in_store_price, currency) if self.in_store_price is not None else None
            ),
            at_home_price=(
                Money.of(self.at_home_price, currency) if self.at_home_price is not None else None
            ),
            available_locations=tuple(
                InstallationLocation(
                    location_id=loc.location_id,
                    name=loc.name,
                    price_delta=Money.of(loc.price_delta, currency),
                    enabled=loc.enabled,
                )
                for loc in self.available_locations
            ),
        )


class CreateProductInput(InputModel):
    name: str = Field(min_length=1)
    description: str | None = None
    base_price: Decimal = Field(ge=0)
    offer_percentage: Decimal | None = Field(default=None, ge=0, lt=100)
    images: list[ProductImageInput] = Field(default_factory=list)
    variants: list[ProductVariantInput] = Field(default_factory=list)
    sub_category_ids: list[str] = Field(default_factory=list)
    installation_service: InstallationServiceInput | None = None
    variant_stock: list[VariantStockInput] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)


class UpdateProductInput(InputModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    base_price: Decimal | None = Field(default=None, ge=0)
    offer_percentage: Decimal | None = Field(default=None, ge=0, lt=100)
    images: list[ProductImageInput] | None = None
    variants: list[ProductVariantInput] | None = None
    sub_category_ids: list[str] | None = None
    installation_service: InstallationServiceInput | None = None
    variant_stock: list[VariantStockInput] | None = None
    highlights: list[str] | None = None


class ImageMappingInput(InputModel):
    image_id: str
    variant_item_ids: list[str] = Field(default_factory=list)


class CreateVariantTypeInput(InputModel):
    name: str = Field(min_length=1)
    items: list[VariantItemInput] = Field(min_length=1)


class UpdateVariantTypeInput(InputModel):
    name: str | None = Field(default=None, min_length=1)
    items: list[VariantItemInput] | None = None


# --- Storefront ---------------------------------------------------------------


class AddToCartInput(InputModel):
    product_id: str = Field(min_length=1)
    selected_variant_item_ids: list[str] = Field(default_factory=list)
    quantity: int = Field(ge=1)
    installation_option: Literal["none", "in_store", "at_home"] = "none"
    installation_location_id: str | None = None


class UpdateCartItemInput(InputModel):
    product_id: str = Field(min_length=1)
    selected_variant_item_ids: list[str] = Field(default_factory=list)
    quantity: int


class CheckoutCompletedEvent(InputModel):
    """The payment provider's "checkout completed" notification."""

    payment_session_id: str = Field(min_length=1)
    session_id: str = Field(min_length=1)
    payment_status: str = "unpaid"
    amount_total: int | None = Field(default=None, ge=0)  # minor units
    currency: str | None = None
