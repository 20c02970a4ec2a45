"""CLI commands for stock items."""

from __future__ import annotations

import click

from posinv.application.add_stock_item import AddStockItemHandler
from posinv.application.remove_stock_item import RemoveStockItemHandler
from posinv.application.restock import RestockHandler
from posinv.application.show_stock import (
    SORT_KEYS,
    ShowStockHandler,
    ShowStockItemHandler,
)
from posinv.application.update_stock_item import UpdateStockItemHandler
from posinv.domain.exceptions import DomainException
from posinv.infrastructure.bootstrap import (
    product_repository,
    stock_ledger,
    stock_repository,
)


@click.command("add")
@click.option("--name", required=True, help="Stock item name.")
@click.option("--category", required=True, help="Category, e.g. Dairy.")
@click.option("--unit", required=True, help="Unit label, e.g. kg.")
@click.option("--quantity", required=True, help="Opening quantity.")
@click.option("--cost", required=True, help="Cost charged per --cost-per units.")
@click.option("--cost-per", default="1", show_default=True, help="Units the cost covers.")
@click.option("--supplier", default=None, help="Supplier ID.")
def stock_add(
    name: str,
    category: str,
    unit: str,
    quantity: str,
    cost: str,
    cost_per: str,
    supplier: str | None,
) -> None:
    """Add a new stock item."""
    handler = AddStockItemHandler(stock_repo=stock_repository())

    try:
        item = handler.handle(
            name=name,
            category=category,
            unit=unit,
            quantity=quantity,
            cost=cost,
            cost_per=cost_per,
            supplier_id=supplier,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Stock item #{item.id} '{item.name}' added with "
        f"{item.quantity_available} {item.unit}"
    )


@click.command("list")
@click.option(
    "--sort-by",
    type=click.Choice(sorted(SORT_KEYS)),
    default=None,
    help="Sort order (default: insertion order).",
)
def stock_list(sort_by: str | None) -> None:
    """List stock items."""
    handler = ShowStockHandler(stock_repo=stock_repository())
    items = handler.handle(sort_by=sort_by)

    if not items:
        click.echo("No stock items found.")
        return

    click.echo(
        f"{'ID':<6} {'Name':<20} {'Category':<14} {'Available':>12} {'Unit':<8} {'Cost/unit':>10}"
    )
    click.echo("-" * 75)
    for item in items:
        click.echo(
            f"{item.id:<6} {item.name:<20} {item.category:<14} "
            f"{item.quantity_available:>12} {item.unit:<8} {item.cost_per_unit:>10}"
        )


@click.command("restock")
@click.option("--id", "stock_item_id", required=True, help="Stock item ID.")
@click.option("--quantity", required=True, help="Quantity received.")
def stock_restock(stock_item_id: str, quantity: str) -> None:
    """Add delivered quantity to a stock item."""
    handler = RestockHandler(stock_repo=stock_repository(), ledger=stock_ledger())

    try:
        item = handler.handle(stock_item_id=stock_item_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"'{item.name}' now has {item.quantity_available} {item.unit}")


@click.command("show")
@click.option("--id", "stock_item_id", required=True, help="Stock item ID.")
def stock_show(stock_item_id: str) -> None:
    """Show one stock item."""
    handler = ShowStockItemHandler(stock_repo=stock_repository())

    try:
        item = handler.handle(stock_item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock item #{item.id}  {item.name}")
    click.echo(f"Category:   {item.category}")
    click.echo(f"Available:  {item.quantity_available} {item.unit}")
    click.echo(f"Cost:       {item.cost} per {item.cost_per} {item.unit}")
    click.echo(f"Cost/unit:  {item.cost_per_unit}")
    click.echo(f"Supplier:   {item.supplier_id or '-'}")


@click.command("update")
@click.option("--id", "stock_item_id", required=True, help="Stock item ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--category", default=None, help="New category.")
@click.option("--unit", default=None, help="New unit label.")
@click.option("--cost", default=None, help="New cost per --cost-per units.")
@click.option("--cost-per", default=None, help="New number of units the cost covers.")
@click.option("--supplier", default=None, help="New supplier ID ('' to clear).")
def stock_update(
    stock_item_id: str,
    name: str | None,
    category: str | None,
    unit: str | None,
    cost: str | None,
    cost_per: str | None,
    supplier: str | None,
) -> None:
    """Edit a stock item. Quantities change only through restock and orders."""
    handler = UpdateStockItemHandler(stock_repo=stock_repository())

    try:
        item = handler.handle(
            stock_item_id,
            name=name,
            category=category,
            unit=unit,
            cost=cost,
            cost_per=cost_per,
            supplier_id=supplier,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock item #{item.id} '{item.name}' updated")


@click.command("remove")
@click.option("--id", "stock_item_id", required=True, help="Stock item ID.")
def stock_remove(stock_item_id: str) -> None:
    """Delete a stock item."""
    handler = RemoveStockItemHandler(
        stock_repo=stock_repository(),
        product_repo=product_repository(),
    )

    try:
        users = handler.handle(stock_item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock item #{stock_item_id} removed.")
    if users:
        click.echo(f"Warning: still used by {', '.join(users)}")
