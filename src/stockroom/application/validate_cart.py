"""Application service: Validate Cart use case (advisory pre-payment check)."""

from __future__ import annotations

from stockroom.application.update_cart import load_cart
from stockroom.domain.model.stock import StockAvailability, StockRequest
from stockroom.domain.repository.cart_repository import CartRepository
from stockroom.domain.service.variant_stock_service import VariantStockService


class ValidateCartHandler:

    def __init__(self, cart_repo: CartRepository, stock_service: VariantStockService) -> None:
        self._cart_repo = cart_repo
        self._stock_service = stock_service

    def handle(self, session_id: str) -> StockAvailability:
        cart = load_cart(self._cart_repo, session_id)
        return self._stock_service.validate_stock_availability(
            StockRequest(
                product_id=item.product_id,
                selected_variant_item_ids=item.selected_variant_item_ids,
                quantity=item.quantity,
            )
            for item in cart.items
        )
