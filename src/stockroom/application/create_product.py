"""Application service: Create Product use case."""

from __future__ import annotations

from stockroom.application.schemas import CreateProductInput, parse_input
from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY, Money
from stockroom.domain.repository.product_repository import ProductRepository


class CreateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        max_combinations: int | None = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._product_repo = product_repo
        self._max_combinations = max_combinations
        self._currency = currency

    def handle(self, payload: dict) -> Product:
        """Validate the payload, build the product and persist it.

        Images without an id get one; images without an order keep
        their position in the payload.
        """
        data = parse_input(CreateProductInput, payload)

        product = Product.create(
            name=data.name,
            base_price=Money.of(data.base_price, self._currency),
            offer_percentage=data.offer_percentage,
            variants=[v.to_domain() for v in data.variants],
            variant_stock=[s.to_domain(self._currency) for s in data.variant_stock],
            max_combinations=self._max_combinations,
            description=data.description,
            images=[img.to_domain(index) for index, img in enumerate(data.images)],
            installation_service=(
                data.installation_service.to_domain(self._currency)
                if data.installation_service is not None
                else None
            ),
            sub_category_ids=list(data.sub_category_ids),
            highlights=list(data.highlights),
        )

        self._product_repo.add(product)
        return product
