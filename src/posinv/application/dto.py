"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from posinv.domain.model.order import Order


@dataclass(frozen=True)
class OrderLineSpec:
    """Input: which product and how many units."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class IngredientSpec:
    """Input: one ingredient of a new product."""

    stock_item_id: str
    quantity_required: str  # parsed to Decimal by the handler


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: str
    product_name: str
    quantity: int


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    status: str
    lines: list[OrderLineDTO]
    created_at: str


@dataclass(frozen=True)
class StockItemDTO:
    id: str
    name: str
    category: str
    unit: str
    quantity_available: str
    cost: str
    cost_per: str
    cost_per_unit: str
    supplier_id: str | None


@dataclass(frozen=True)
class IngredientLineDTO:
    stock_item_id: str
    stock_item_name: str | None
    quantity_required: str
    unit: str


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    ingredient_count: int
    cost: str | None  # None when a stock item is missing
    ingredients: list[IngredientLineDTO] = field(default_factory=list)


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        status=order.status.value,
        lines=[
            OrderLineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
            )
            for line in order.lines
        ],
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
