"""Application service: Update Stock Item use case.

Edits what a stock item *is* (name, category, unit, cost, supplier).  How
much of it is on the shelf is not editable here: deliveries go through
restock, and orders through the StockLedger.
"""

from __future__ import annotations

from posinv.domain.exceptions import StockItemNotFoundError
from posinv.domain.model.stock import MIN_COST_PER, StockItem
from posinv.domain.model.value_objects import Money, to_decimal
from posinv.domain.repository.stock_repository import StockRepository


class UpdateStockItemHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(
        self,
        stock_item_id: str,
        name: str | None = None,
        category: str | None = None,
        unit: str | None = None,
        cost: str | None = None,
        cost_per: str | None = None,
        supplier_id: str | None = None,
    ) -> StockItem:
        """Apply the given fields; None leaves a field unchanged.

        An empty ``supplier_id`` clears the supplier.
        """
        current = self._stock_repo.get(stock_item_id)
        if current is None:
            raise StockItemNotFoundError(stock_item_id)

        edited = StockItem.create(
            id=current.id,
            name=current.name if name is None else name,
            category=current.category if category is None else category,
            unit=current.unit if unit is None else unit,
            quantity_available=current.quantity_available,
            cost=current.cost if cost is None else Money(to_decimal(cost, "Cost")),
            cost_per=(
                current.cost_per
                if cost_per is None
                else to_decimal(cost_per, "Cost per", minimum=MIN_COST_PER)
            ),
            supplier_id=current.supplier_id if supplier_id is None else supplier_id,
        )

        stored = self._stock_repo.update(edited)
        if stored is None:
            # Removed between our read and the write
            raise StockItemNotFoundError(stock_item_id)
        return stored

