"""Order aggregate.

An order is placed already ``completed``: stock is deducted at the moment
it is created.  The only later transition is ``completed -> discarded``,
which returns the stock.  Discarded orders may then be deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from posinv.domain.exceptions import (
    AlreadyDiscardedError,
    OrderNotDeletableError,
    ValidationError,
)
from posinv.domain.model.product import Ingredient
from posinv.domain.model.value_objects import Quantity


class OrderStatus(Enum):
    COMPLETED = "completed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class OrderLine:
    """One product and how many units of it were ordered.

    ``ingredients`` is a snapshot of the product's recipe at placement
    time, so the stock returned on discard matches what was deducted even
    if the product is edited or deleted afterwards.  Older records may
    carry no snapshot (None).
    """

    product_id: str
    product_name: str
    quantity: Quantity
    ingredients: tuple[Ingredient, ...] | None = None


@dataclass
class Order:
    """Aggregate root for point-of-sale orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.COMPLETED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(lines: list[OrderLine]) -> Order:
        if not lines:
            raise ValidationError("Order must contain at least one product")
        return Order(id=None, lines=list(lines))

    # --- Transition guards ----------------------------------------------------
    #
    # The status itself is switched by the repository with a conditional
    # update, so concurrent callers cannot both pass these checks and act.

    def ensure_discardable(self) -> None:
        """COMPLETED -> DISCARDED is the only transition; it happens once."""
        if self.status == OrderStatus.DISCARDED:
            raise AlreadyDiscardedError(self.id)

    def ensure_deletable(self) -> None:
        if self.status != OrderStatus.DISCARDED:
            raise OrderNotDeletableError(self.id, self.status.value)  # type: ignore[arg-type]
