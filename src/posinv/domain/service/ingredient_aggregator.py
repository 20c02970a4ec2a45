"""Domain service: Ingredient Aggregation.

Turns order lines into the total quantity needed per stock item.  Two
products that share an ingredient contribute to the same entry.

The aggregation runs in one of two modes:

* strict (placing an order): any unusable product or dangling stock
  reference aborts the whole computation.  A partial map would silently
  under-deduct, so no result is better than a wrong one.
* tolerant (discarding an order): the same problems are logged and
  skipped, so that whatever stock can still be returned is returned.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Mapping

from posinv.domain.exceptions import (
    DanglingIngredientReferenceError,
    InvalidProductError,
    ProductNotFoundError,
)
from posinv.domain.model.demand import AggregateDemand
from posinv.domain.model.lookup import Lookup, Missing, Resolved, resolve
from posinv.domain.model.product import Product
from posinv.domain.model.stock import StockItem
from posinv.domain.repository.stock_repository import StockRepository

logger = logging.getLogger(__name__)


def aggregate(
    lines: Iterable[tuple[Lookup[Product], int]],
    stock_items: Mapping[str, Lookup[StockItem]],
    *,
    tolerant: bool = False,
) -> AggregateDemand:
    """Compute aggregate demand for ``(product, quantity)`` lines.

    ``stock_items`` maps every stock item ID the products reference to
    its lookup result; an ID absent from the mapping counts as missing.
    """
    demand = AggregateDemand()

    for product_lookup, quantity in lines:
        if isinstance(product_lookup, Missing):
            if not tolerant:
                raise ProductNotFoundError(product_lookup.id)
            logger.warning(
                "Product %s no longer exists, skipping its stock", product_lookup.id
            )
            continue

        product = product_lookup.entity
        if not product.ingredients:
            if not tolerant:
                raise InvalidProductError(
                    product.id, f'Product "{product.name}" has no ingredients defined'
                )
            logger.warning("Product %r has no ingredients, skipping", product.name)
            continue

        for ingredient in product.ingredients:
            stock_lookup = stock_items.get(
                ingredient.stock_item_id, Missing(ingredient.stock_item_id)
            )
            if isinstance(stock_lookup, Missing):
                if not tolerant:
                    raise DanglingIngredientReferenceError(product.id, stock_lookup.id)
                logger.warning(
                    "Stock item %s used by product %r no longer exists, skipping",
                    stock_lookup.id,
                    product.name,
                )
                continue

            item = stock_lookup.entity
            demand.add(
                item.id,
                item.name,
                item.unit,
                ingredient.quantity_required * Decimal(quantity),
            )

    logger.debug("Aggregated demand: %r", demand)
    return demand


def resolve_stock_items(
    products: Iterable[Lookup[Product]], stock_repo: StockRepository
) -> dict[str, Lookup[StockItem]]:
    """Look up every stock item referenced by *products* once."""
    resolved: dict[str, Lookup[StockItem]] = {}
    for product_lookup in products:
        if not isinstance(product_lookup, Resolved):
            continue
        for ingredient in product_lookup.entity.ingredients:
            sid = ingredient.stock_item_id
            if sid not in resolved:
                resolved[sid] = resolve(sid, stock_repo.get)
    return resolved
