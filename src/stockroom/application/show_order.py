"""Application services: order queries and status changes."""

from __future__ import annotations

from stockroom.application.dto import OrderDTO
from stockroom.domain.exceptions import EntityNotFoundError, ValidationError
from stockroom.domain.model.order import Order, OrderStatus
from stockroom.domain.repository.order_repository import OrderRepository


def _load_order(order_repo: OrderRepository, order_id: str) -> Order:
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(
            f"Order '{order_id}' not found",
            code="ORDER_NOT_FOUND",
            details={"orderId": order_id},
        )
    return order


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        return OrderDTO.from_order(_load_order(self._order_repo, order_id))


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, session_id: str) -> list[OrderDTO]:
        """Orders of a storefront session, newest first."""
        orders = self._order_repo.list_by_session_id(session_id)
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return [OrderDTO.from_order(o) for o in orders]


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, status: str) -> Order:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status '{status}' (expected one of: {allowed})",
                code="INVALID_ORDER_STATUS",
            ) from None
        order = _load_order(self._order_repo, order_id)
        order.set_status(new_status)
        self._order_repo.save(order)
        return order
