"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each error carries the structured data a caller needs to act on it, and
``retryable`` tells the caller whether resubmitting the same request can
succeed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from posinv.domain.model.demand import InsufficiencyReport


class DomainException(Exception):
    """Base class for all domain errors."""

    retryable = False


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidRequestError(ValidationError):
    """The caller sent malformed input (empty order, bad quantity...)."""


class InvalidProductError(ValidationError):
    """A product cannot be used to compute stock demand."""

    def __init__(self, product_id: str, message: str) -> None:
        super().__init__(message)
        self.product_id = product_id


class OrderNotDeletableError(ValidationError):
    """Only discarded orders may be deleted."""

    def __init__(self, order_id: int, status: str) -> None:
        super().__init__(
            f"Order #{order_id} must be discarded before deletion "
            f"(current status is {status})"
        )
        self.order_id = order_id


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ProductNotFoundError(EntityNotFoundError):

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' not found")
        self.entity_id = product_id


class StockItemNotFoundError(EntityNotFoundError):

    def __init__(self, stock_item_id: str) -> None:
        super().__init__(f"Stock item {stock_item_id} not found")
        self.entity_id = stock_item_id


class OrderNotFoundError(EntityNotFoundError):

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order #{order_id} not found")
        self.entity_id = order_id


class InsufficientStockError(DomainException):
    """Stock cannot cover the demand. Lists every short item, not just the first."""

    def __init__(self, report: InsufficiencyReport) -> None:
        super().__init__(str(report))
        self.report = report


class AlreadyDiscardedError(DomainException):

    def __init__(self, order_id: int | None) -> None:
        super().__init__(f"Order #{order_id} is already discarded")
        self.order_id = order_id


class DanglingIngredientReferenceError(DomainException):
    """An ingredient points at a stock item that no longer exists."""

    def __init__(self, product_id: str | None, stock_item_id: str) -> None:
        if product_id is None:
            message = f"Stock item '{stock_item_id}' not found"
        else:
            message = (
                f"Stock item '{stock_item_id}' for an ingredient of "
                f"product '{product_id}' not found"
            )
        super().__init__(message)
        self.product_id = product_id
        self.stock_item_id = stock_item_id


class ConcurrentContentionError(DomainException):
    """Concurrent updates kept invalidating a reservation."""

    retryable = True

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Stock reservation gave up after {attempts} conflicting attempts; "
            f"please retry"
        )
        self.attempts = attempts


class InconsistentStateError(DomainException):
    """Stock and persisted orders disagree and need manual reconciliation."""

    def __init__(self, message: str, stock_item_ids: list[str]) -> None:
        super().__init__(message)
        self.stock_item_ids = stock_item_ids
