"""Application service: Show / List Orders use cases (queries)."""

from __future__ import annotations

from posinv.application.dto import OrderDTO, to_order_dto
from posinv.domain.exceptions import OrderNotFoundError
from posinv.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return to_order_dto(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self) -> list[OrderDTO]:
        return [to_order_dto(order) for order in self._order_repo.list_all()]
