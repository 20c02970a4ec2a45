"""Product aggregate.

A product is a recipe: a list of stock items and how much of each one is
consumed to make one unit.  Its cost is always derived from current stock
costs, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from posinv.domain.exceptions import ValidationError
from posinv.domain.model.stock import StockItem
from posinv.domain.model.value_objects import Money


@dataclass(frozen=True)
class Ingredient:
    stock_item_id: str
    unit: str
    quantity_required: Decimal  # per one unit of product

    def __post_init__(self) -> None:
        if self.quantity_required < 0:
            raise ValidationError("Ingredient quantity cannot be negative")


@dataclass
class Product:
    """A product in the catalog.

    The plain ``__init__`` lets repositories reconstitute a product whose
    ingredient list has since become empty; ``Product.create()`` is the
    entry point for new products.
    """

    id: str | None  # assigned by the repository on create
    name: str
    ingredients: list[Ingredient]

    @staticmethod
    def create(id: str | None, name: str, ingredients: list[Ingredient]) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not ingredients:
            raise ValidationError("Product must have at least one ingredient")
        return Product(id=id, name=name.strip(), ingredients=list(ingredients))

    def cost(self, stock_items: Mapping[str, StockItem]) -> Money | None:
        """Sum of ``quantity_required * cost_per_unit`` over all ingredients.

        Returns None if any ingredient's stock item is not in *stock_items*.
        """
        total = Money.zero()
        for ingredient in self.ingredients:
            item = stock_items.get(ingredient.stock_item_id)
            if item is None:
                return None
            total = total + item.cost_per_unit * ingredient.quantity_required
        return total
