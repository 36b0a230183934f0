"""Application service: Update Product use case.

Only fields present in the payload are written. The stock ledger is
re-checked whenever variants or stock change, so a ledger can never
refer to variant items the product no longer offers. The ledger itself
is written only when the payload replaces it.
"""

from __future__ import annotations

from stockroom.application.schemas import UpdateProductInput, parse_input
from stockroom.domain.exceptions import ProductNotFoundError
from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import DEFAULT_CURRENCY, Money
from stockroom.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        max_combinations: int | None = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._product_repo = product_repo
        self._max_combinations = max_combinations
        self._currency = currency

    def handle(self, product_id: str, payload: dict) -> Product:
        data = parse_input(UpdateProductInput, payload)

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        changed: list[str] = []
        if data.name is not None:
            product.name = data.name.strip()
            changed.append("name")
        if "description" in data.model_fields_set:
            product.description = data.description
            changed.append("description")
        if data.base_price is not None:
            product.base_price = Money.of(data.base_price, self._currency)
            changed.append("base_price")
        if data.offer_percentage is not None:
            product.set_offer_percentage(data.offer_percentage)
            changed.append("offer_percentage")
        if data.images is not None:
            product.images = [img.to_domain(index) for index, img in enumerate(data.images)]
            changed.append("images")
        if data.sub_category_ids is not None:
            product.sub_category_ids = list(data.sub_category_ids)
            changed.append("sub_category_ids")
        if data.installation_service is not None:
            product.installation_service = data.installation_service.to_domain(self._currency)
            changed.append("installation_service")
        if data.highlights is not None:
            product.highlights = list(data.highlights)
            changed.append("highlights")

        if data.variants is not None or data.variant_stock is not None:
            if data.variants is not None:
                product.variants = [v.to_domain() for v in data.variants]
                changed.append("variants")
            if data.variant_stock is not None:
                product.set_variant_stock(
                    [s.to_domain(self._currency) for s in data.variant_stock],
                    self._max_combinations,
                )
                changed.append("variant_stock")
            else:
                # Checked against the new variants but left as stored.
                product.set_variant_stock(list(product.variant_stock), self._max_combinations)

        product.touch()
        if not self._product_repo.update_fields(product, changed):
            raise ProductNotFoundError(product_id)
        return product
