"""JSON-file-backed implementation of StockRepository."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Mapping

from posinv.domain.exceptions import ValidationError
from posinv.domain.model.stock import StockItem
from posinv.domain.model.value_objects import Money
from posinv.domain.repository.stock_repository import StockRepository
from posinv.infrastructure.persistence.json_file import JsonFile, next_id


class JsonStockRepository(StockRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- StockRepository interface --------------------------------------------

    def get(self, stock_item_id: str) -> StockItem | None:
        for raw in self._file.load():
            if raw["id"] == stock_item_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[StockItem]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def create(self, item: StockItem) -> StockItem:
        with self._file.locked():
            records = self._file.load()
            stored = replace(item, id=next_id(raw["id"] for raw in records))
            records.append(self._to_raw(stored))
            self._file.persist(records)
        return stored

    def update(self, item: StockItem) -> StockItem | None:
        with self._file.locked():
            records = self._file.load()
            for index, raw in enumerate(records):
                if raw["id"] != item.id:
                    continue
                # Quantity only moves through the ledger's swap and increment
                stored = replace(
                    item, quantity_available=Decimal(raw["quantity_available"])
                )
                records[index] = self._to_raw(stored)
                self._file.persist(records)
                return stored
        return None

    def remove(self, stock_item_id: str) -> bool:
        with self._file.locked():
            records = self._file.load()
            kept = [raw for raw in records if raw["id"] != stock_item_id]
            if len(kept) == len(records):
                return False
            self._file.persist(kept)
            return True

    def compare_and_swap_quantities(
        self, changes: Mapping[str, tuple[Decimal, Decimal]]
    ) -> bool:
        with self._file.locked():
            records = self._file.load()
            by_id = {raw["id"]: raw for raw in records}

            for stock_item_id, (expected, new_value) in changes.items():
                if new_value < 0:
                    raise ValidationError(
                        f"Stock quantity for '{stock_item_id}' cannot go negative"
                    )
                raw = by_id.get(stock_item_id)
                if raw is None or Decimal(raw["quantity_available"]) != expected:
                    return False

            for stock_item_id, (_, new_value) in changes.items():
                by_id[stock_item_id]["quantity_available"] = str(new_value)

            self._file.persist(records)
            return True

    def add_quantities(self, deltas: Mapping[str, Decimal]) -> list[str]:
        with self._file.locked():
            records = self._file.load()
            by_id = {raw["id"]: raw for raw in records}

            missing = []
            for stock_item_id, delta in deltas.items():
                raw = by_id.get(stock_item_id)
                if raw is None:
                    missing.append(stock_item_id)
                    continue
                raw["quantity_available"] = str(Decimal(raw["quantity_available"]) + delta)

            if len(missing) < len(deltas):
                self._file.persist(records)
            return missing

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: StockItem) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "category": item.category,
            "unit": item.unit,
            "quantity_available": str(item.quantity_available),
            "cost": str(item.cost.amount),
            "currency": item.cost.currency,
            "cost_per": str(item.cost_per),
            "supplier_id": item.supplier_id,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockItem:
        return StockItem(
            id=raw["id"],
            name=raw["name"],
            category=raw["category"],
            unit=raw["unit"],
            quantity_available=Decimal(raw["quantity_available"]),
            cost=Money(Decimal(raw["cost"]), raw.get("currency", "USD")),
            cost_per=Decimal(raw.get("cost_per", "1")),
            supplier_id=raw.get("supplier_id"),
        )
