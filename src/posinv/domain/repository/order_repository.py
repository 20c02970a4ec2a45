"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from posinv.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def create(self, order: Order) -> Order:
        """Persist a new order, assigning its ID. Returns the stored order."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def set_status(
        self,
        order_id: int,
        status: OrderStatus,
        expected: OrderStatus | None = None,
    ) -> Order | None:
        """Change an order's status and return the updated order.

        With ``expected``, the change is conditional: returns None without
        writing if the stored status differs (or the order is gone).
        """

    @abstractmethod
    def delete(self, order_id: int) -> None:
        """Remove an order. Callers check the deletion precondition."""
