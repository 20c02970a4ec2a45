"""Application service: Discard Order use case.

Discarding returns an order's ingredients to stock and marks it
``discarded`` so it can later be deleted.

Unlike placement, this path must always make progress.  An order whose
product or stock item has been deleted since it was placed would
otherwise stay ``completed`` forever, undeletable, with its stock
sequestered.  So every reference that no longer resolves is logged and
skipped, and the rest of the stock is returned.

The status change is claimed *before* stock is released, with a
conditional update on the stored status.  Of two concurrent discards of
the same order only one wins the claim, so stock is returned once.
"""

from __future__ import annotations

import logging

from posinv.domain.exceptions import (
    AlreadyDiscardedError,
    InconsistentStateError,
    OrderNotFoundError,
)
from posinv.domain.model.demand import AggregateDemand
from posinv.domain.model.lookup import Lookup, Resolved, resolve
from posinv.domain.model.order import Order, OrderLine, OrderStatus
from posinv.domain.model.product import Product
from posinv.domain.repository.order_repository import OrderRepository
from posinv.domain.repository.product_repository import ProductRepository
from posinv.domain.repository.stock_repository import StockRepository
from posinv.domain.service.ingredient_aggregator import aggregate, resolve_stock_items
from posinv.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class DiscardOrderHandler:

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

    def handle(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        order.ensure_discardable()

        demand = self._demand_for(order)

        discarded = self._order_repo.set_status(
            order_id, OrderStatus.DISCARDED, expected=OrderStatus.COMPLETED
        )
        if discarded is None:
            # Another worker discarded (or deleted) it after we loaded it
            raise AlreadyDiscardedError(order_id)

        try:
            self._ledger.release(demand.quantities())
        except BaseException:
            self._undo_claim(order_id, demand)
            raise

        logger.info("Order #%s discarded, %d stock item(s) returned", order_id, len(demand))
        return discarded

    # --- Internal helpers -----------------------------------------------------

    def _demand_for(self, order: Order) -> AggregateDemand:
        """Tolerant aggregate over the order's lines."""
        products = [self._product_for(line) for line in order.lines]
        stock_items = resolve_stock_items(products, self._stock_repo)
        demand = aggregate(
            zip(products, (line.quantity.value for line in order.lines)),
            stock_items,
            tolerant=True,
        )
        if not demand:
            logger.warning("Order #%s has no stock left to return", order.id)
        return demand

    def _product_for(self, line: OrderLine) -> Lookup[Product]:
        if line.ingredients is not None:
            return Resolved(
                Product(
                    id=line.product_id,
                    name=line.product_name,
                    ingredients=list(line.ingredients),
                )
            )
        # No recipe snapshot on this line: fall back to the current catalog
        return resolve(line.product_id, self._product_repo.get_by_id)

    def _undo_claim(self, order_id: int, demand: AggregateDemand) -> None:
        try:
            restored = self._order_repo.set_status(
                order_id, OrderStatus.COMPLETED, expected=OrderStatus.DISCARDED
            )
        except BaseException as exc:
            restored = None
            cause: BaseException | None = exc
        else:
            cause = None

        if restored is None:
            logger.critical(
                "Order #%s is marked discarded but its stock was not returned",
                order_id,
            )
            raise InconsistentStateError(
                f"Order #{order_id} is marked discarded but returning its stock failed",
                stock_item_ids=list(demand),
            ) from cause
