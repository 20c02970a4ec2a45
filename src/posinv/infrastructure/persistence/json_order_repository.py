"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from posinv.domain.model.order import Order, OrderLine, OrderStatus
from posinv.domain.model.value_objects import Quantity
from posinv.domain.repository.order_repository import OrderRepository
from posinv.infrastructure.persistence.json_file import JsonFile
from posinv.infrastructure.persistence.json_product_repository import (
    ingredient_from_raw,
    ingredient_to_raw,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def create(self, order: Order) -> Order:
        with self._file.locked():
            records = self._file.load()
            order.id = max((raw["id"] for raw in records), default=0) + 1
            records.append(self._to_raw(order))
            self._file.persist(records)
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._file.load()]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    def set_status(
        self,
        order_id: int,
        status: OrderStatus,
        expected: OrderStatus | None = None,
    ) -> Order | None:
        with self._file.locked():
            records = self._file.load()
            for raw in records:
                if raw["id"] != order_id:
                    continue
                if expected is not None and raw["status"] != expected.value:
                    return None
                raw["status"] = status.value
                self._file.persist(records)
                return self._to_domain(raw)
        return None

    def delete(self, order_id: int) -> None:
        with self._file.locked():
            records = [raw for raw in self._file.load() if raw["id"] != order_id]
            self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity.value,
                    "ingredients": (
                        None
                        if line.ingredients is None
                        else [ingredient_to_raw(i) for i in line.ingredients]
                    ),
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                product_id=line["product_id"],
                product_name=line["product_name"],
                quantity=Quantity(line["quantity"]),
                ingredients=(
                    None
                    if line.get("ingredients") is None
                    else tuple(ingredient_from_raw(i) for i in line["ingredients"])
                ),
            )
            for line in raw["lines"]
        ]
        return Order(
            id=raw["id"],
            lines=lines,
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
