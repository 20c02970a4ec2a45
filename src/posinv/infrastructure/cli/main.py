import logging

import click

from posinv.infrastructure.cli.order_commands import (
    order_delete,
    order_discard,
    order_list,
    order_place,
    order_show,
)
from posinv.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_remove,
    product_show,
    product_update,
)
from posinv.infrastructure.cli.stock_commands import (
    stock_add,
    stock_list,
    stock_remove,
    stock_restock,
    stock_show,
    stock_update,
)
from posinv.infrastructure.config import get_settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """POS Inventory: stock, products and orders."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def stock() -> None:
    """Manage stock items."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Place and manage orders."""


# Register subcommands
stock.add_command(stock_add)
stock.add_command(stock_list)
stock.add_command(stock_remove)
stock.add_command(stock_restock)
stock.add_command(stock_show)
stock.add_command(stock_update)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_remove)
product.add_command(product_show)
product.add_command(product_update)
order.add_command(order_delete)
order.add_command(order_discard)
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_show)
