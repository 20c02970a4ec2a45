"""Application service: Restock use case.

Deliveries go through the StockLedger like every other quantity change.
"""

from __future__ import annotations

from decimal import Decimal

from posinv.domain.exceptions import StockItemNotFoundError, ValidationError
from posinv.domain.model.stock import StockItem
from posinv.domain.model.value_objects import to_decimal
from posinv.domain.repository.stock_repository import StockRepository
from posinv.domain.service.stock_ledger import StockLedger


class RestockHandler:

    def __init__(
        self,
        stock_repo: StockRepository,
        ledger: StockLedger | None = None,
    ) -> None:
        self._stock_repo = stock_repo
        self._ledger = ledger or StockLedger(stock_repo)

    def handle(self, stock_item_id: str, quantity: str) -> StockItem:
        amount = to_decimal(quantity, "Restock quantity")
        if amount == Decimal("0"):
            raise ValidationError("Restock quantity must be positive")

        if self._stock_repo.get(stock_item_id) is None:
            raise StockItemNotFoundError(stock_item_id)

        if self._ledger.release({stock_item_id: amount}):
            raise StockItemNotFoundError(stock_item_id)

        return self._stock_repo.get(stock_item_id)  # type: ignore[return-value]
