"""Application service: Place Order use case.

Placing an order deducts its ingredients from stock and records it as
``completed`` in one go:

1. Validate the request and resolve each product (fail if not found).
2. Aggregate ingredient demand across all lines (strict mode).
3. Build the order, then reserve the aggregate through the StockLedger,
   all or nothing.
4. Persist the order.

If step 4 fails, the stock taken in step 3 is handed back before the
error propagates, including when the failure is a cancellation
(``KeyboardInterrupt`` and friends).  A deduction with no order to
explain it must never be left behind silently.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from posinv.application.dto import OrderLineSpec
from posinv.domain.exceptions import InconsistentStateError, InvalidRequestError
from posinv.domain.model.lookup import Lookup, Resolved, resolve
from posinv.domain.model.order import Order, OrderLine
from posinv.domain.model.product import Product
from posinv.domain.model.value_objects import Quantity
from posinv.domain.repository.order_repository import OrderRepository
from posinv.domain.repository.product_repository import ProductRepository
from posinv.domain.repository.stock_repository import StockRepository
from posinv.domain.service.ingredient_aggregator import aggregate, resolve_stock_items
from posinv.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        stock_repo: StockRepository,
        ledger: StockLedger | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._stock_repo = stock_repo
        self._ledger = ledger or StockLedger(stock_repo)

    def handle(self, specs: list[OrderLineSpec]) -> Order:
        self._validate(specs)

        products: list[Lookup[Product]] = [
            resolve(spec.product_id, self._product_repo.get_by_id) for spec in specs
        ]
        stock_items = resolve_stock_items(products, self._stock_repo)
        demand = aggregate(
            zip(products, (spec.quantity for spec in specs)), stock_items
        )

        lines = [
            OrderLine(
                product_id=lookup.entity.id,  # type: ignore[arg-type]
                product_name=lookup.entity.name,
                quantity=Quantity(spec.quantity),
                ingredients=tuple(lookup.entity.ingredients),  # <-- recipe snapshot
            )
            for lookup, spec in zip(products, specs)
            if isinstance(lookup, Resolved)
        ]
        new_order = Order.create(lines)

        quantities = demand.quantities()
        self._ledger.reserve(quantities)

        # Nothing may run between a committed reservation and this block
        try:
            order = self._order_repo.create(new_order)
        except BaseException as exc:
            logger.error("Persisting order failed (%s), returning reserved stock", exc)
            self._compensate(quantities)
            raise

        logger.info(
            "Order #%s placed: %d line(s), %d stock item(s) deducted",
            order.id,
            len(order.lines),
            len(quantities),
        )
        return order

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _validate(specs: list[OrderLineSpec]) -> None:
        if not specs:
            raise InvalidRequestError("Please provide at least one product")
        for spec in specs:
            if isinstance(spec.quantity, bool) or not isinstance(spec.quantity, int):
                raise InvalidRequestError(
                    f"Quantity for product '{spec.product_id}' must be an integer"
                )
            if spec.quantity < 1:
                raise InvalidRequestError(
                    f"Quantity for product '{spec.product_id}' must be at least 1"
                )

    def _compensate(self, quantities: dict[str, Decimal]) -> None:
        try:
            self._ledger.release(quantities)
        except BaseException as exc:
            logger.critical(
                "Compensating release failed; stock %s was deducted with no order "
                "recorded and needs manual reconciliation",
                quantities,
            )
            raise InconsistentStateError(
                "Stock was deducted but the order could not be saved, and "
                "returning the stock failed",
                stock_item_ids=list(quantities),
            ) from exc
