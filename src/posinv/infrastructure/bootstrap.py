"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Repositories are cached per file so that every handler in a process
shares the same file lock.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from posinv.domain.service.stock_ledger import StockLedger
from posinv.infrastructure.config import get_settings
from posinv.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from posinv.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from posinv.infrastructure.persistence.json_stock_repository import (
    JsonStockRepository,
)


def stock_repository() -> JsonStockRepository:
    return _stock_repository(get_settings().data_dir / "stock.json")


def product_repository() -> JsonProductRepository:
    return _product_repository(get_settings().data_dir / "products.json")


def order_repository() -> JsonOrderRepository:
    return _order_repository(get_settings().data_dir / "orders.json")


def stock_ledger() -> StockLedger:
    settings = get_settings()
    return StockLedger(
        stock_repository(),
        max_attempts=settings.reserve_max_attempts,
        backoff_seconds=settings.reserve_backoff_seconds,
    )


@lru_cache(maxsize=None)
def _stock_repository(path: Path) -> JsonStockRepository:
    return JsonStockRepository(path)


@lru_cache(maxsize=None)
def _product_repository(path: Path) -> JsonProductRepository:
    return JsonProductRepository(path)


@lru_cache(maxsize=None)
def _order_repository(path: Path) -> JsonOrderRepository:
    return JsonOrderRepository(path)
