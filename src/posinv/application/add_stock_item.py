"""Application service: Add Stock Item use case."""

from __future__ import annotations

from posinv.domain.model.stock import MIN_COST_PER, StockItem
from posinv.domain.model.value_objects import Money, to_decimal
from posinv.domain.repository.stock_repository import StockRepository


class AddStockItemHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(
        self,
        name: str,
        category: str,
        unit: str,
        quantity: str,
        cost: str,
        cost_per: str = "1",
        supplier_id: str | None = None,
    ) -> StockItem:
        """Add a new stock item with its opening quantity.

        The repository assigns the ID.
        """
        item = StockItem.create(
            id=None,
            name=name,
            category=category,
            unit=unit,
            quantity_available=to_decimal(quantity, "Quantity"),
            cost=Money(to_decimal(cost, "Cost")),
            cost_per=to_decimal(cost_per, "Cost per", minimum=MIN_COST_PER),
            supplier_id=supplier_id,
        )
        return self._stock_repo.create(item)
