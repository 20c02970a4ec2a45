"""Application service: Remove Stock Item use case.

Products that still use the item are left as they are; placing an order
for one of them fails until its recipe is fixed, and discarding older
orders skips the missing item.
"""

from __future__ import annotations

import logging

from posinv.domain.exceptions import StockItemNotFoundError
from posinv.domain.repository.product_repository import ProductRepository
from posinv.domain.repository.stock_repository import StockRepository

logger = logging.getLogger(__name__)


class RemoveStockItemHandler:

    def __init__(
        self,
        stock_repo: StockRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._stock_repo = stock_repo
        self._product_repo = product_repo

    def handle(self, stock_item_id: str) -> list[str]:
        """Delete the stock item.  Returns the names of products still using it."""
        if not self._stock_repo.remove(stock_item_id):
            raise StockItemNotFoundError(stock_item_id)

        users = [
            product.name
            for product in self._product_repo.list_all()
            if any(i.stock_item_id == stock_item_id for i in product.ingredients)
        ]
        if users:
            logger.warning(
                "Stock item %s removed but still used by: %s",
                stock_item_id,
                ", ".join(users),
            )
        return users
