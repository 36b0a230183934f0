"""Conversion helpers shared by the Mongo repositories.

Stored documents use camelCase keys, ObjectId primary keys and plain
numbers for money, so they stay readable by the storefront.
"""

from __future__ import annotations

from decimal import Decimal

from bson import ObjectId

from stockroom.domain.exceptions import InvalidIdError
from stockroom.domain.model.value_objects import Money


def to_object_id(value: str, label: str = "id") -> ObjectId:
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdError(f"Invalid {label}: '{value}'", details={"id": value})
    return ObjectId(value)


def money_to_raw(money: Money | None) -> float | None:
    if money is None:
        return None
    return float(money.amount)


def money_from_raw(value, currency: str) -> Money | None:
    if value is None:
        return None
    return Money.of(value, currency)


def decimal_to_raw(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def decimal_from_raw(value) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None
