"""Application service: Delete Product use case."""

from __future__ import annotations

from stockroom.domain.exceptions import ProductNotFoundError
from stockroom.domain.repository.product_repository import ProductRepository


class DeleteProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> None:
        if self._product_repo.get_by_id(product_id) is None:
            raise ProductNotFoundError(product_id)
        self._product_repo.delete(product_id)
