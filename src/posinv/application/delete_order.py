"""Application service: Delete Order use case.

Only discarded orders may be deleted: deleting a completed order would
drop the only record of why its stock is gone.
"""

from __future__ import annotations

import logging

from posinv.domain.exceptions import OrderNotFoundError
from posinv.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        order.ensure_deletable()
        self._order_repo.delete(order_id)
        logger.info("Order #%s deleted", order_id)
