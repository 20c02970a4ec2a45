"""Abstract repository for StockItem.

This is the only place ``quantity_available`` is written.  Writes come in
two shapes: a conditional swap (used to take stock, where a stale read
could overdraw) and an unconditional increment (used to give stock back,
where increments commute).  Implementations must make each call atomic
across all the items it names.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Mapping

from posinv.domain.model.stock import StockItem


class StockRepository(ABC):

    @abstractmethod
    def get(self, stock_item_id: str) -> StockItem | None:
        """Return a stock item by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[StockItem]:
        """Return every stock item."""

    @abstractmethod
    def create(self, item: StockItem) -> StockItem:
        """Persist a new stock item under the next free ID and return it.

        ``item.id`` is ignored; its quantity is the opening quantity.
        """

    @abstractmethod
    def update(self, item: StockItem) -> StockItem | None:
        """Replace the descriptive fields of the stored item with *item*'s.

        The stored ``quantity_available`` is kept, whatever *item* says.
        Returns the stored item, or None if it does not exist.
        """

    @abstractmethod
    def remove(self, stock_item_id: str) -> bool:
        """Delete a stock item. Returns False if it did not exist."""

    @abstractmethod
    def compare_and_swap_quantities(
        self, changes: Mapping[str, tuple[Decimal, Decimal]]
    ) -> bool:
        """Apply ``{id: (expected, new)}`` only if every stored quantity
        still equals its ``expected`` value.

        All-or-nothing: returns False and writes nothing if any item is
        missing or has changed.
        """

    @abstractmethod
    def add_quantities(self, deltas: Mapping[str, Decimal]) -> list[str]:
        """Add each delta to its item's quantity in one atomic step.

        Returns the IDs that no longer exist (those deltas are dropped).
        """

    def get_quantity(self, stock_item_id: str) -> Decimal | None:
        item = self.get(stock_item_id)
        return None if item is None else item.quantity_available
