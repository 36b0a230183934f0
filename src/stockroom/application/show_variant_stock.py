"""Application service: Show Variant Stock use case (query)."""

from __future__ import annotations

from stockroom.application.dto import StockLineDTO, VariantStockReportDTO
from stockroom.domain.exceptions import ProductNotFoundError
from stockroom.domain.repository.product_repository import ProductRepository


class ShowVariantStockHandler:

    def __init__(self, product_repo: ProductRepository, max_combinations: int | None = None) -> None:
        self._product_repo = product_repo
        self._max_combinations = max_combinations

    def handle(self, product_id: str) -> VariantStockReportDTO:
        """One line per possible combination, tracked or not."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        lines = []
        for combination in product.combinations(self._max_combinations):
            tracked = product.tracks_combination(combination.key)
            lines.append(
                StockLineDTO(
                    key=combination.key,
                    label=combination.label,
                    tracked=tracked,
                    stock_count=product.stock_for(combination.item_ids) if tracked else None,
                    price=str(product.unit_price_for(combination.item_ids)),
                )
            )

        info = product.stock_info()
        return VariantStockReportDTO(
            product_id=product.id or "",
            product_name=product.name,
            status=info.status.value,
            total_stock=info.total_stock,
            lines=lines,
        )
