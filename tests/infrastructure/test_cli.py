"""End-to-end tests for the click CLI against a temporary data directory."""

import pytest
from click.testing import CliRunner

from posinv.infrastructure.cli.main import cli


@pytest.fixture
def invoke(tmp_path):
    runner = CliRunner()
    env = {"POSINV_DATA_DIR": str(tmp_path), "POSINV_RESERVE_BACKOFF_SECONDS": "0"}

    def _invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return _invoke


@pytest.fixture
def espresso(invoke):
    """One stock item (Beans, 50 kg) and one product (Espresso) using it."""
    result = invoke(
        "stock", "add", "--name", "Beans", "--category", "Coffee",
        "--unit", "kg", "--quantity", "50", "--cost", "25",
    )
    assert result.exit_code == 0, result.output
    result = invoke("product", "add", "--name", "Espresso", "--ingredients", "1:0.02")
    assert result.exit_code == 0, result.output


class TestStockCommands:

    def test_add_and_list(self, invoke):
        result = invoke(
            "stock", "add", "--name", "Cinnamon", "--category", "Spices",
            "--unit", "g", "--quantity", "500", "--cost", "15", "--cost-per", "100",
        )

        assert result.exit_code == 0
        assert "Stock item #1 'Cinnamon' added with 500 g" in result.output

        listing = invoke("stock", "list", "--sort-by", "category")
        assert "Cinnamon" in listing.output
        assert "$0.15" in listing.output

    def test_invalid_quantity_reported(self, invoke):
        result = invoke(
            "stock", "add", "--name", "Milk", "--category", "Dairy",
            "--unit", "l", "--quantity", "-3", "--cost", "1",
        )

        assert result.exit_code == 1
        assert "Quantity must be at least 0" in result.output

    def test_restock(self, invoke, espresso):
        result = invoke("stock", "restock", "--id", "1", "--quantity", "5")

        assert result.exit_code == 0
        assert "'Beans' now has 55 kg" in result.output

    def test_show(self, invoke, espresso):
        result = invoke("stock", "show", "--id", "1")

        assert result.exit_code == 0
        assert "Stock item #1  Beans" in result.output
        assert "Available:  50 kg" in result.output

    def test_show_unknown_item(self, invoke):
        result = invoke("stock", "show", "--id", "4")

        assert result.exit_code == 1
        assert "Stock item 4 not found" in result.output

    def test_update_leaves_quantity_alone(self, invoke, espresso):
        result = invoke("stock", "update", "--id", "1", "--name", "Arabica", "--cost", "30")

        assert result.exit_code == 0, result.output
        assert "Stock item #1 'Arabica' updated" in result.output
        shown = invoke("stock", "show", "--id", "1").output
        assert "Arabica" in shown
        assert "Available:  50 kg" in shown

    def test_remove_warns_about_products_using_it(self, invoke, espresso):
        result = invoke("stock", "remove", "--id", "1")

        assert result.exit_code == 0
        assert "Stock item #1 removed." in result.output
        assert "still used by Espresso" in result.output
        assert "No stock items found." in invoke("stock", "list").output


class TestProductCommands:

    def test_list_shows_cost(self, invoke, espresso):
        result = invoke("product", "list")

        assert result.exit_code == 0
        assert "Espresso" in result.output
        assert "$0.50" in result.output

    def test_unknown_stock_item_reported(self, invoke):
        result = invoke("product", "add", "--name", "Tea", "--ingredients", "7:1")

        assert result.exit_code == 1
        assert "Stock item 7 not found" in result.output

    def test_malformed_ingredients_rejected(self, invoke):
        result = invoke("product", "add", "--name", "Tea", "--ingredients", "7")

        assert result.exit_code == 2

    def test_show_lists_recipe(self, invoke, espresso):
        result = invoke("product", "show", "--id", "1")

        assert result.exit_code == 0
        assert "Product #1  Espresso  (cost $0.50)" in result.output
        assert "Beans" in result.output

    def test_update_recipe(self, invoke, espresso):
        result = invoke("product", "update", "--id", "1", "--ingredients", "1:0.04")

        assert result.exit_code == 0, result.output
        assert "$1.00" in invoke("product", "list").output

    def test_remove(self, invoke, espresso):
        result = invoke("product", "remove", "--id", "1")

        assert result.exit_code == 0
        assert "No products found." in invoke("product", "list").output

    def test_remove_unknown_product(self, invoke):
        result = invoke("product", "remove", "--id", "3")

        assert result.exit_code == 1


class TestOrderCommands:

    def test_place_discard_delete(self, invoke, espresso):
        placed = invoke("order", "place", "--items", "1:10")
        assert placed.exit_code == 0, placed.output
        assert "Order #1  (status=completed)" in placed.output
        assert "49.80" in invoke("stock", "list").output

        discarded = invoke("order", "discard", "--id", "1")
        assert discarded.exit_code == 0
        assert "Order #1 discarded" in discarded.output
        assert "50.00" in invoke("stock", "list").output

        deleted = invoke("order", "delete", "--id", "1")
        assert deleted.exit_code == 0
        assert "No orders found." in invoke("order", "list").output

    def test_insufficient_stock_lists_shortfalls(self, invoke, espresso):
        result = invoke("order", "place", "--items", "1:5000")

        assert result.exit_code == 1
        assert "not enough stock" in result.output
        assert "Beans: available 50, needed 100.00" in result.output
        assert "No orders found." in invoke("order", "list").output

    def test_second_discard_rejected(self, invoke, espresso):
        invoke("order", "place", "--items", "1:1")
        invoke("order", "discard", "--id", "1")

        result = invoke("order", "discard", "--id", "1")

        assert result.exit_code == 1

    def test_completed_order_cannot_be_deleted(self, invoke, espresso):
        invoke("order", "place", "--items", "1:1")

        result = invoke("order", "delete", "--id", "1")

        assert result.exit_code == 1
        assert "status=completed" in invoke("order", "show", "--id", "1").output

    def test_unknown_product_reported(self, invoke, espresso):
        result = invoke("order", "place", "--items", "9:1")

        assert result.exit_code == 1

    def test_malformed_items_rejected(self, invoke):
        result = invoke("order", "place", "--items", "1:many")

        assert result.exit_code == 2
