"""Tests for the JSON-file repositories, using a temporary data directory."""

import json
import multiprocessing
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from posinv.domain.exceptions import (
    ConcurrentContentionError,
    InsufficientStockError,
    ValidationError,
)
from posinv.domain.model.order import Order, OrderLine, OrderStatus
from posinv.domain.model.product import Ingredient
from posinv.domain.model.value_objects import Quantity
from posinv.domain.service.stock_ledger import StockLedger
from posinv.infrastructure.persistence.json_order_repository import JsonOrderRepository
from posinv.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from posinv.infrastructure.persistence.json_stock_repository import JsonStockRepository
from tests.builders import product, stock


@pytest.fixture
def stock_repo(tmp_path):
    repo = JsonStockRepository(tmp_path / "stock.json")
    repo.create(stock(None, "Beans", "50", cost="25.00"))
    repo.create(stock(None, "Milk", "7.5", unit="l", cost="15", cost_per="100"))
    return repo


class TestJsonStockRepository:

    def test_creates_empty_file(self, tmp_path):
        JsonStockRepository(tmp_path / "nested" / "stock.json")
        assert json.loads((tmp_path / "nested" / "stock.json").read_text()) == []

    def test_round_trips_decimals_exactly(self, stock_repo, tmp_path):
        milk = JsonStockRepository(tmp_path / "stock.json").get("2")

        assert milk.quantity_available == Decimal("7.5")
        assert milk.cost_per == Decimal("100")
        assert milk.unit == "l"
        raw = json.loads((tmp_path / "stock.json").read_text())
        assert raw[1]["quantity_available"] == "7.5"

    def test_create_assigns_next_id(self, stock_repo):
        created = stock_repo.create(stock("1", "Sugar", "3"))

        assert created.id == "3"
        assert stock_repo.get("3").name == "Sugar"
        assert stock_repo.get("1").name == "Beans"

    def test_update_keeps_stored_quantity(self, stock_repo):
        stored = stock_repo.update(
            replace(stock_repo.get("2"), name="Oat Milk", quantity_available=Decimal("999"))
        )

        assert stored.quantity_available == Decimal("7.5")
        assert stock_repo.get("2").name == "Oat Milk"
        assert stock_repo.get_quantity("2") == Decimal("7.5")

    def test_update_missing_item(self, stock_repo):
        assert stock_repo.update(stock("9", "Ghost", "1")) is None

    def test_remove(self, stock_repo):
        assert stock_repo.remove("1") is True
        assert stock_repo.remove("1") is False
        assert [i.id for i in stock_repo.list_all()] == ["2"]

    def test_compare_and_swap_applies_every_change(self, stock_repo):
        assert stock_repo.compare_and_swap_quantities(
            {"1": (Decimal("50"), Decimal("49.8")), "2": (Decimal("7.5"), Decimal("5.5"))}
        )

        assert stock_repo.get_quantity("1") == Decimal("49.8")
        assert stock_repo.get_quantity("2") == Decimal("5.5")

    def test_compare_and_swap_is_all_or_nothing(self, stock_repo):
        swapped = stock_repo.compare_and_swap_quantities(
            {"1": (Decimal("50"), Decimal("40")), "2": (Decimal("7"), Decimal("5"))}
        )

        assert swapped is False
        assert stock_repo.get_quantity("1") == Decimal("50")
        assert stock_repo.get_quantity("2") == Decimal("7.5")

    def test_compare_and_swap_fails_for_missing_item(self, stock_repo):
        assert not stock_repo.compare_and_swap_quantities(
            {"1": (Decimal("50"), Decimal("40")), "9": (Decimal("0"), Decimal("0"))}
        )
        assert stock_repo.get_quantity("1") == Decimal("50")

    def test_compare_and_swap_refuses_negative(self, stock_repo):
        with pytest.raises(ValidationError):
            stock_repo.compare_and_swap_quantities({"1": (Decimal("50"), Decimal("-1"))})
        assert stock_repo.get_quantity("1") == Decimal("50")

    def test_add_quantities_reports_missing(self, stock_repo):
        missing = stock_repo.add_quantities({"1": Decimal("0.2"), "gone": Decimal("1")})

        assert missing == ["gone"]
        assert stock_repo.get_quantity("1") == Decimal("50.2")

    def test_get_quantity_of_missing_item_is_none(self, stock_repo):
        assert stock_repo.get_quantity("9") is None


class TestJsonProductRepository:

    def test_save_and_reload(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(product("1", "Latte", ("1", "0.02"), ("2", "0.2")))

        loaded = JsonProductRepository(tmp_path / "products.json").get_by_id("1")

        assert loaded.name == "Latte"
        assert loaded.ingredients[1] == Ingredient("2", "kg", Decimal("0.2"))

    def test_get_by_name_ignores_case(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(product("1", "Latte", ("1", "0.02")))

        assert repo.get_by_name("LATTE").id == "1"
        assert repo.get_by_name("Mocha") is None

    def test_save_replaces_existing(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(product("1", "Latte", ("1", "0.02")))
        repo.save(product("1", "Latte", ("1", "0.03")))

        assert len(repo.list_all()) == 1
        assert repo.get_by_id("1").ingredients[0].quantity_required == Decimal("0.03")

    def test_create_assigns_next_id(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(product("legacy", "Tea", ("1", "1")))
        repo.save(product("4", "Latte", ("1", "0.02")))

        created = repo.create(product(None, "Mocha", ("1", "0.03")))

        assert created.id == "5"
        assert repo.get_by_id("5").name == "Mocha"

    def test_remove(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(product("1", "Latte", ("1", "0.02")))

        assert repo.remove("1") is True
        assert repo.remove("1") is False
        assert repo.list_all() == []


def _order(*ingredients):
    line = OrderLine(
        product_id="1",
        product_name="Latte",
        quantity=Quantity(2),
        ingredients=tuple(ingredients) if ingredients else None,
    )
    return Order.create([line])


class TestJsonOrderRepository:

    def test_create_assigns_increasing_ids(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")

        first = repo.create(_order())
        second = repo.create(_order())

        assert (first.id, second.id) == (1, 2)

    def test_recipe_snapshot_persisted(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = repo.create(_order(Ingredient("1", "kg", Decimal("0.02"))))

        line = JsonOrderRepository(tmp_path / "orders.json").get_by_id(order.id).lines[0]

        assert line.quantity == Quantity(2)
        assert line.ingredients == (Ingredient("1", "kg", Decimal("0.02")),)

    def test_line_without_snapshot_persisted_as_none(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = repo.create(_order())

        assert repo.get_by_id(order.id).lines[0].ingredients is None

    def test_set_status_is_conditional(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = repo.create(_order())

        claimed = repo.set_status(
            order.id, OrderStatus.DISCARDED, expected=OrderStatus.COMPLETED
        )
        again = repo.set_status(
            order.id, OrderStatus.DISCARDED, expected=OrderStatus.COMPLETED
        )

        assert claimed.status == OrderStatus.DISCARDED
        assert again is None
        assert repo.get_by_id(order.id).status == OrderStatus.DISCARDED

    def test_set_status_of_missing_order(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        assert repo.set_status(3, OrderStatus.DISCARDED) is None

    def test_list_newest_first_and_delete(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        older = _order()
        older.created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        first = repo.create(older)
        second = repo.create(_order())

        assert [o.id for o in repo.list_all()] == [second.id, first.id]

        repo.delete(first.id)

        assert repo.get_by_id(first.id) is None
        assert [o.id for o in repo.list_all()] == [second.id]


def _reserve_until_empty(path: str, attempts: int) -> int:
    """Reserve one unit of item "1" *attempts* times; return how many committed."""
    ledger = StockLedger(
        JsonStockRepository(Path(path)), max_attempts=1000, backoff_seconds=0
    )
    committed = 0
    for _ in range(attempts):
        try:
            ledger.reserve({"1": Decimal("1")})
        except (InsufficientStockError, ConcurrentContentionError):
            continue
        committed += 1
    return committed


def _create_items(path: str, count: int) -> list[str]:
    repo = JsonStockRepository(Path(path))
    return [repo.create(stock(None, "Beans", "1")).id for _ in range(count)]


class TestJsonStoreConcurrency:

    INITIAL = 60

    @pytest.fixture
    def store(self, tmp_path):
        path = tmp_path / "stock.json"
        JsonStockRepository(path).create(stock(None, "Beans", str(self.INITIAL)))
        return path

    def _assert_no_lost_updates(self, path, committed):
        final = JsonStockRepository(path).get_quantity("1")
        assert committed > 0
        assert final == self.INITIAL - committed
        assert final >= 0

    def test_threads_sharing_one_repository(self, store):
        repo = JsonStockRepository(store)
        ledger = StockLedger(repo, max_attempts=1000, backoff_seconds=0)

        def reserve_many():
            committed = 0
            for _ in range(12):
                try:
                    ledger.reserve({"1": Decimal("1")})
                except (InsufficientStockError, ConcurrentContentionError):
                    continue
                committed += 1
            return committed

        with ThreadPoolExecutor(max_workers=8) as pool:
            committed = sum(pool.map(lambda _: reserve_many(), range(8)))

        self._assert_no_lost_updates(store, committed)

    def test_threads_with_their_own_repositories(self, store):
        with ThreadPoolExecutor(max_workers=6) as pool:
            committed = sum(pool.map(_reserve_until_empty, [str(store)] * 6, [15] * 6))

        self._assert_no_lost_updates(store, committed)

    @pytest.mark.skipif(
        "fork" not in multiprocessing.get_all_start_methods(),
        reason="needs the fork start method",
    )
    def test_separate_processes(self, store):
        context = multiprocessing.get_context("fork")
        with ProcessPoolExecutor(max_workers=4, mp_context=context) as pool:
            committed = sum(pool.map(_reserve_until_empty, [str(store)] * 4, [25] * 4))

        self._assert_no_lost_updates(store, committed)
        assert not list(store.parent.glob("*.tmp"))

    def test_concurrent_creates_get_distinct_ids(self, tmp_path):
        path = str(tmp_path / "stock.json")
        with ThreadPoolExecutor(max_workers=5) as pool:
            batches = list(pool.map(_create_items, [path] * 5, [6] * 5))

        ids = [i for batch in batches for i in batch]
        assert len(set(ids)) == 30
        assert len(JsonStockRepository(Path(path)).list_all()) == 30
