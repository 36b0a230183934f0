"""Application services: product queries."""

from __future__ import annotations

import math

from stockroom.application.dto import PaginationDTO, ProductPageDTO, ProductSummaryDTO
from stockroom.domain.exceptions import ProductNotFoundError, ValidationError
from stockroom.domain.model.product import Product
from stockroom.domain.repository.product_repository import ProductRepository


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        page: int = 1,
        limit: int = 20,
        sub_category_id: str | None = None,
    ) -> ProductPageDTO:
        if page < 1 or limit < 1:
            raise ValidationError("Page and limit must be positive")

        products, total = self._product_repo.list_page(page, limit, sub_category_id)
        summaries = []
        for product in products:
            info = product.stock_info()
            summaries.append(
                ProductSummaryDTO(
                    id=product.id or "",
                    name=product.name,
                    price=str(product.effective_base_price),
                    stock_status=info.status.value,
                    total_stock=info.total_stock,
                )
            )
        return ProductPageDTO(
            products=summaries,
            pagination=PaginationDTO(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit),
            ),
        )
