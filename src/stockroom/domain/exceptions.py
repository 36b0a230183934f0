"""Domain-level exceptions.

Every business rule violation is a subclass of DomainException carrying a
machine-readable ``code`` and an HTTP-style ``status`` so the boundary
(CLI or any future API) can turn it into a structured response without
knowing the concrete type.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "DOMAIN_ERROR"
    status = 400

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: dict | None = None,
    ) -> None:
        if code is not None:
            self.code = code
        super().__init__(message or self.code)
        self.details = details or {}


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``errors`` holds field-level violations when the error comes from
    validating an untrusted payload.
    """

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        errors: list[dict] | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.errors = errors or []
        if self.errors:
            self.details.setdefault("errors", self.errors)


class InvalidIdError(ValidationError):
    """An identifier is not well-formed."""

    code = "INVALID_ID"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "NOT_FOUND"
    status = 404


class ProductNotFoundError(EntityNotFoundError):

    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Product '{product_id}' not found",
            details={"productId": product_id},
        )
        self.product_id = product_id


class ConflictError(DomainException):
    """The operation clashes with existing state (e.g. a duplicate name)."""

    code = "CONFLICT"
    status = 409


class InsufficientStockError(DomainException):
    """A ledger entry holds fewer units than requested."""

    code = "INSUFFICIENT_STOCK"

    def __init__(
        self,
        product_id: str,
        variant_key: str,
        requested: int,
        available: int,
    ) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id} ({variant_key}): "
            f"requested {requested}, available {available}",
            details={
                "productId": product_id,
                "variantKey": variant_key,
                "requested": requested,
                "available": available,
            },
        )
        self.product_id = product_id
        self.variant_key = variant_key
        self.requested = requested
        self.available = available


class CombinationLimitExceededError(ValidationError):
    """A product's variants expand into more combinations than allowed."""

    code = "TOO_MANY_VARIANT_COMBINATIONS"

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"Variants expand into {count} combinations (limit {limit})",
            details={"count": count, "limit": limit},
        )
        self.count = count
        self.limit = limit
