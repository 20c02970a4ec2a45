"""StockItem: a raw ingredient kept on the shelf.

The item is frozen: ``quantity_available`` is never assigned in place.
The only way it changes is a compare-and-swap or an increment applied by
the StockRepository on behalf of the StockLedger.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from posinv.domain.exceptions import ValidationError
from posinv.domain.model.value_objects import Money

MIN_COST_PER = Decimal("0.01")


@dataclass(frozen=True)
class StockItem:
    """A stock item and its cost normalisation.

    ``cost`` is what the supplier charges for ``cost_per`` units, e.g.
    $15 per 100 grams of cinnamon.
    """

    id: str | None  # assigned by the repository on create
    name: str
    category: str
    unit: str
    quantity_available: Decimal
    cost: Money
    cost_per: Decimal = Decimal("1")
    supplier_id: str | None = None

    @staticmethod
    def create(
        id: str | None,
        name: str,
        category: str,
        unit: str,
        quantity_available: Decimal,
        cost: Money,
        cost_per: Decimal = Decimal("1"),
        supplier_id: str | None = None,
    ) -> StockItem:
        """Create a new stock item, enforcing all invariants."""
        for label, value in (("name", name), ("category", category), ("unit", unit)):
            if not value or not value.strip():
                raise ValidationError(f"Stock item {label} is required")
        if quantity_available < 0:
            raise ValidationError("Stock quantity cannot be negative")
        if cost_per < MIN_COST_PER:
            raise ValidationError(f"Cost per must be at least {MIN_COST_PER}")

        return StockItem(
            id=id,
            name=name.strip(),
            category=category.strip(),
            unit=unit.strip(),
            quantity_available=quantity_available,
            cost=cost,
            cost_per=cost_per,
            supplier_id=supplier_id or None,
        )

    @property
    def cost_per_unit(self) -> Money:
        return self.cost / self.cost_per
