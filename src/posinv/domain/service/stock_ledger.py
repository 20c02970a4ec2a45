"""Domain service: Stock Ledger.

The single mutation path for ``StockItem.quantity_available``.

``reserve`` is optimistic.  Each attempt reads every demanded item,
validates the whole demand (collecting *every* shortfall), and then
submits one all-or-nothing compare-and-swap for the full set.  If any
item changed since it was read, nothing is written and the attempt is
repeated from a fresh read after an exponential backoff.  Two callers can
therefore never both pass validation against the same stale quantity,
and no lock is held between the read and the write, so reservations over
disjoint stock items never wait on each other.

``release`` only adds, and additions commute, so it is applied as a
single atomic increment with no conflict check.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable, Mapping

from posinv.domain.exceptions import (
    ConcurrentContentionError,
    DanglingIngredientReferenceError,
    InsufficientStockError,
    ValidationError,
)
from posinv.domain.model.demand import InsufficiencyReport, Shortfall
from posinv.domain.repository.stock_repository import StockRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BACKOFF_SECONDS = 0.01


class StockLedger:

    def __init__(
        self,
        stock_repo: StockRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._stock_repo = stock_repo
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    def reserve(self, demand: Mapping[str, Decimal]) -> None:
        """Deduct every quantity in *demand*, or nothing at all.

        Raises:
            InsufficientStockError: some item has less than needed; the
                report lists every short item.
            DanglingIngredientReferenceError: a demanded item is gone.
            ConcurrentContentionError: every attempt lost a race.
        """
        self._check_quantities(demand)
        if not demand:
            return

        for attempt in range(1, self._max_attempts + 1):
            changes: dict[str, tuple[Decimal, Decimal]] = {}
            shortfalls: list[Shortfall] = []

            # Phase 1: read and validate everything before writing anything
            for stock_item_id, needed in demand.items():
                item = self._stock_repo.get(stock_item_id)
                if item is None:
                    raise DanglingIngredientReferenceError(None, stock_item_id)
                available = item.quantity_available
                if available < needed:
                    shortfalls.append(
                        Shortfall(
                            stock_item_id=stock_item_id,
                            name=item.name,
                            available=available,
                            needed=needed,
                        )
                    )
                changes[stock_item_id] = (available, available - needed)

            if shortfalls:
                report = InsufficiencyReport(tuple(shortfalls))
                logger.warning("Reservation rejected: %s", report)
                raise InsufficientStockError(report)

            # Phase 2: apply, conditional on nothing having moved
            if self._stock_repo.compare_and_swap_quantities(changes):
                logger.info(
                    "Reserved %d stock item(s) on attempt %d", len(changes), attempt
                )
                return

            if attempt < self._max_attempts:
                delay = self._backoff_seconds * (2 ** (attempt - 1))
                logger.debug(
                    "Stock changed during reservation (attempt %d/%d), retrying in %.3fs",
                    attempt,
                    self._max_attempts,
                    delay,
                )
                self._sleep(delay)

        logger.warning(
            "Reservation abandoned after %d conflicting attempts", self._max_attempts
        )
        raise ConcurrentContentionError(self._max_attempts)

    def release(self, demand: Mapping[str, Decimal]) -> list[str]:
        """Give back every quantity in *demand*.

        Items that no longer exist cannot receive their return; they are
        logged and their IDs returned.
        """
        self._check_quantities(demand)
        if not demand:
            return []

        missing = self._stock_repo.add_quantities(dict(demand))
        for stock_item_id in missing:
            logger.warning(
                "Stock item %s not found, cannot return %s",
                stock_item_id,
                demand[stock_item_id],
            )
        logger.info("Released %d stock item(s)", len(demand) - len(missing))
        return missing

    @staticmethod
    def _check_quantities(demand: Mapping[str, Decimal]) -> None:
        for stock_item_id, quantity in demand.items():
            if quantity < 0:
                raise ValidationError(
                    f"Quantity for stock item '{stock_item_id}' cannot be negative"
                )
