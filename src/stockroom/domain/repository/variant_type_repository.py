"""Abstract repository for the VariantType aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.variant import VariantType


class VariantTypeRepository(ABC):

    @abstractmethod
    def get_by_id(self, variant_type_id: str) -> VariantType | None:
        """Return a variant type by its ID, or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> VariantType | None:
        """Return the variant type with this exact name, or None."""

    @abstractmethod
    def list_all(self) -> list[VariantType]:
        """Return every variant type, newest first."""

    @abstractmethod
    def save(self, variant_type: VariantType) -> None:
        """Persist a new or updated variant type."""

    @abstractmethod
    def delete(self, variant_type_id: str) -> bool:
        """Remove a variant type. Returns False when nothing was deleted."""
