"""Application services: variant type catalog."""

from __future__ import annotations

from stockroom.application.schemas import (
    CreateVariantTypeInput,
    UpdateVariantTypeInput,
    VariantItemInput,
    parse_input,
)
from stockroom.domain.exceptions import ConflictError, EntityNotFoundError
from stockroom.domain.model.variant import VariantType
from stockroom.domain.repository.variant_type_repository import VariantTypeRepository


def _not_found(variant_type_id: str) -> EntityNotFoundError:
    return EntityNotFoundError(
        f"Variant type '{variant_type_id}' not found",
        code="VARIANT_TYPE_NOT_FOUND",
        details={"variantTypeId": variant_type_id},
    )


class _VariantTypeHandler:

    def __init__(self, variant_type_repo: VariantTypeRepository) -> None:
        self._variant_type_repo = variant_type_repo

    def _load(self, variant_type_id: str) -> VariantType:
        variant_type = self._variant_type_repo.get_by_id(variant_type_id)
        if variant_type is None:
            raise _not_found(variant_type_id)
        return variant_type

    def _ensure_name_free(self, name: str, own_id: str | None = None) -> None:
        existing = self._variant_type_repo.get_by_name(name.strip())
        if existing is not None and existing.id != own_id:
            raise ConflictError(
                f"Variant type '{name.strip()}' already exists",
                code="VARIANT_TYPE_EXISTS",
            )


class CreateVariantTypeHandler(_VariantTypeHandler):

    def handle(self, payload: dict) -> VariantType:
        data = parse_input(CreateVariantTypeInput, payload)
        self._ensure_name_free(data.name)
        variant_type = VariantType.create(data.name, [i.to_domain() for i in data.items])
        self._variant_type_repo.save(variant_type)
        return variant_type


class UpdateVariantTypeHandler(_VariantTypeHandler):

    def handle(self, variant_type_id: str, payload: dict) -> VariantType:
        """Rename and/or replace the item list.

        Products keep their own copy of selected items, so existing
        products are not rewritten.
        """
        data = parse_input(UpdateVariantTypeInput, payload)
        variant_type = self._load(variant_type_id)

        if data.name is not None:
            self._ensure_name_free(data.name, own_id=variant_type.id)
            variant_type.rename(data.name)
        if data.items is not None:
            replacement = VariantType.create(variant_type.name, [i.to_domain() for i in data.items])
            variant_type.items = replacement.items
            variant_type.touch()

        self._variant_type_repo.save(variant_type)
        return variant_type


class DeleteVariantTypeHandler(_VariantTypeHandler):

    def handle(self, variant_type_id: str) -> None:
        if not self._variant_type_repo.delete(variant_type_id):
            raise _not_found(variant_type_id)


class ListVariantTypesHandler(_VariantTypeHandler):

    def handle(self) -> list[VariantType]:
        return sorted(self._variant_type_repo.list_all(), key=lambda vt: vt.name.lower())


class AddVariantItemHandler(_VariantTypeHandler):

    def handle(self, variant_type_id: str, payload: dict) -> VariantType:
        item = parse_input(VariantItemInput, payload).to_domain()
        variant_type = self._load(variant_type_id)
        variant_type.add_item(item)
        self._variant_type_repo.save(variant_type)
        return variant_type


class RemoveVariantItemHandler(_VariantTypeHandler):
    """Products keep their own copy of selected items, so they are unaffected."""

    def handle(self, variant_type_id: str, item_id: str) -> VariantType:
        variant_type = self._load(variant_type_id)
        variant_type.remove_item(item_id)
        self._variant_type_repo.save(variant_type)
        return variant_type
