"""Aggregate demand and insufficiency reports.

Both are ephemeral: computed for a single operation and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, Mapping


@dataclass
class DemandEntry:
    name: str
    unit: str
    required: Decimal = Decimal("0")


class AggregateDemand(Mapping[str, DemandEntry]):
    """Total quantity required per stock item, keyed by stock item id."""

    def __init__(self) -> None:
        self._entries: dict[str, DemandEntry] = {}

    def add(self, stock_item_id: str, name: str, unit: str, quantity: Decimal) -> None:
        entry = self._entries.get(stock_item_id)
        if entry is None:
            entry = self._entries[stock_item_id] = DemandEntry(name=name, unit=unit)
        entry.required += quantity

    def quantities(self) -> dict[str, Decimal]:
        """Plain ``stock_item_id -> required`` mapping for the StockLedger."""
        return {sid: entry.required for sid, entry in self._entries.items()}

    def __getitem__(self, stock_item_id: str) -> DemandEntry:
        return self._entries[stock_item_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AggregateDemand({self.quantities()!r})"


@dataclass(frozen=True)
class Shortfall:
    stock_item_id: str
    name: str
    available: Decimal
    needed: Decimal

    def __str__(self) -> str:
        return (
            f"Ingredient \"{self.name}\" is not enough. "
            f"Available: {self.available}, Needed: {self.needed}"
        )


@dataclass(frozen=True)
class InsufficiencyReport:
    shortfalls: tuple[Shortfall, ...]

    def __str__(self) -> str:
        return "Order cannot be placed. " + "; ".join(str(s) for s in self.shortfalls)

    def __iter__(self) -> Iterator[Shortfall]:
        return iter(self.shortfalls)

    def __len__(self) -> int:
        return len(self.shortfalls)

    def by_stock_item(self) -> Mapping[str, Shortfall]:
        return {s.stock_item_id: s for s in self.shortfalls}
