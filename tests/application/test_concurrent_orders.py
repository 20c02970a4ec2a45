"""Concurrency tests: many workers placing and discarding at once."""

import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from posinv.application.discard_order import DiscardOrderHandler
from posinv.application.dto import OrderLineSpec
from posinv.application.place_order import PlaceOrderHandler
from posinv.domain.exceptions import (
    AlreadyDiscardedError,
    ConcurrentContentionError,
    InsufficientStockError,
)
from posinv.domain.service.stock_ledger import StockLedger
from tests.builders import product, stock
from tests.fakes import FakeOrderRepository, FakeProductRepository, FakeStockRepository


class SlowReadStockRepository(FakeStockRepository):
    """Widens the window between reading stock and writing it back."""

    def __init__(self, items, barrier: threading.Barrier | None = None) -> None:
        super().__init__(items)
        self._barrier = barrier

    def get(self, stock_item_id):
        item = super().get(stock_item_id)
        if self._barrier is not None:
            try:
                # Let every worker read before anyone writes
                self._barrier.wait(timeout=1)
            except threading.BrokenBarrierError:
                pass
        return item


def _run(workers, fn):
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(fn) for _ in range(workers)]
        return [f.exception() or f.result() for f in futures]


class TestConcurrentPlacement:

    def test_two_orders_competing_for_same_stock(self):
        barrier = threading.Barrier(2)
        stock_repo = SlowReadStockRepository([stock("A", "Flour", "50")], barrier)
        product_repo = FakeProductRepository([product("P", "Bread", ("A", "30"))])
        order_repo = FakeOrderRepository()
        handler = PlaceOrderHandler(
            order_repo,
            product_repo,
            stock_repo,
            ledger=StockLedger(stock_repo, sleep=lambda _: None),
        )

        results = _run(2, lambda: handler.handle([OrderLineSpec("P", 1)]))

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockError)
        assert stock_repo.quantity("A") == Decimal("20")
        assert len(order_repo.list_all()) == 1

    def test_no_overselling_under_load(self):
        stock_repo = FakeStockRepository(
            [stock("A", "Beans", "100"), stock("B", "Milk", "40")]
        )
        product_repo = FakeProductRepository(
            [
                product("P", "Espresso", ("A", "7")),
                product("L", "Latte", ("A", "3"), ("B", "4")),
            ]
        )
        order_repo = FakeOrderRepository()
        handler = PlaceOrderHandler(
            order_repo,
            product_repo,
            stock_repo,
            ledger=StockLedger(stock_repo, max_attempts=50, sleep=lambda _: None),
        )
        counter = iter(range(1000))
        lock = threading.Lock()

        def place():
            with lock:
                n = next(counter)
            spec = OrderLineSpec("P" if n % 2 else "L", 1)
            return handler.handle([spec])

        results = _run(40, place)

        assert all(
            isinstance(r, (InsufficientStockError, ConcurrentContentionError))
            for r in results
            if isinstance(r, Exception)
        )
        placed = order_repo.list_all()
        used_a = sum(
            Decimal(7) if o.lines[0].product_id == "P" else Decimal(3) for o in placed
        )
        used_b = sum(Decimal(4) for o in placed if o.lines[0].product_id == "L")
        assert stock_repo.quantity("A") == Decimal("100") - used_a
        assert stock_repo.quantity("B") == Decimal("40") - used_b
        assert stock_repo.quantity("A") >= 0
        assert stock_repo.quantity("B") >= 0


class TestConcurrentDiscard:

    def test_stock_returned_once(self):
        stock_repo = FakeStockRepository([stock("A", "Beans", "50")])
        product_repo = FakeProductRepository([product("P", "Espresso", ("A", "5"))])
        order_repo = FakeOrderRepository()
        order = PlaceOrderHandler(order_repo, product_repo, stock_repo).handle(
            [OrderLineSpec("P", 2)]
        )
        handler = DiscardOrderHandler(order_repo, product_repo, stock_repo)

        results = _run(8, lambda: handler.handle(order.id))

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 7
        assert all(isinstance(f, AlreadyDiscardedError) for f in failures)
        assert stock_repo.quantity("A") == Decimal("50")
