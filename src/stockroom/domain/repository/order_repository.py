"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockroom.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_payment_session_id(self, payment_session_id: str) -> Order | None:
        """Return the order created for a payment provider session, or None."""

    @abstractmethod
    def list_by_session_id(self, session_id: str) -> list[Order]:
        """Return a storefront session's orders, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
