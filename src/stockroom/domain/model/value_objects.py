"""Value Objects shared across the domain.

Immutable, compared by value, validated on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from stockroom.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "AED"
_CENTS = Decimal("0.01")


@total_ordering
@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount.

    Prices are kept as Decimal end to end; floats only appear at the
    persistence edge.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def percent_off(self, percentage: Decimal | int | float) -> Money:
        """Return this amount reduced by ``percentage`` percent, rounded to cents."""
        pct = Decimal(str(percentage))
        if pct < 0 or pct > 100:
            raise ValidationError(f"Offer percentage must be between 0 and 100, got {pct}")
        discounted = self.amount * (Decimal("100") - pct) / Decimal("100")
        return Money(discounted.quantize(_CENTS, rounding=ROUND_HALF_UP), self.currency)

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Coerce to Decimal through ``str`` so floats keep their printed value."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0"), currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive", code="INVALID_QUANTITY")

    def __str__(self) -> str:
        return str(self.value)
