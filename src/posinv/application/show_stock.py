"""Application service: Show Stock use cases (queries)."""

from __future__ import annotations

from posinv.application.dto import StockItemDTO
from posinv.domain.exceptions import StockItemNotFoundError, ValidationError
from posinv.domain.model.stock import StockItem
from posinv.domain.repository.stock_repository import StockRepository

SORT_KEYS = {
    "category": lambda item: (item.category.lower(), item.name.lower()),
    "supplier": lambda item: (item.supplier_id or "", item.name.lower()),
}


class ShowStockHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(self, sort_by: str | None = None) -> list[StockItemDTO]:
        items = self._stock_repo.list_all()
        if sort_by is not None:
            if sort_by not in SORT_KEYS:
                raise ValidationError(f"Cannot sort stock by {sort_by!r}")
            items.sort(key=SORT_KEYS[sort_by])
        return [to_stock_item_dto(item) for item in items]


class ShowStockItemHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(self, stock_item_id: str) -> StockItemDTO:
        item = self._stock_repo.get(stock_item_id)
        if item is None:
            raise StockItemNotFoundError(stock_item_id)
        return to_stock_item_dto(item)


def to_stock_item_dto(item: StockItem) -> StockItemDTO:
    return StockItemDTO(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        category=item.category,
        unit=item.unit,
        quantity_available=str(item.quantity_available),
        cost=str(item.cost),
        cost_per=str(item.cost_per),
        cost_per_unit=str(item.cost_per_unit),
        supplier_id=item.supplier_id,
    )
