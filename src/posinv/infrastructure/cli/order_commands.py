"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from posinv.application.delete_order import DeleteOrderHandler
from posinv.application.discard_order import DiscardOrderHandler
from posinv.application.dto import OrderDTO, OrderLineSpec, to_order_dto
from posinv.application.place_order import PlaceOrderHandler
from posinv.application.show_order import ListOrdersHandler, ShowOrderHandler
from posinv.domain.exceptions import DomainException, InsufficientStockError
from posinv.infrastructure.bootstrap import (
    order_repository,
    product_repository,
    stock_ledger,
    stock_repository,
)


def _parse_items(raw: str) -> list[OrderLineSpec]:
    """Parse '1:3,2:5' into OrderLineSpec list."""
    specs: list[OrderLineSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderLineSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5}")
    click.echo(f"  {'-'*26}")
    for line in dto.lines:
        click.echo(f"  {line.product_name:<20} {line.quantity:>5}")


@click.command("place")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
def order_place(items: str) -> None:
    """Place an order (deducts ingredients from stock)."""
    specs = _parse_items(items)
    handler = PlaceOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        stock_repo=stock_repository(),
        ledger=stock_ledger(),
    )

    try:
        order = handler.handle(specs)
    except InsufficientStockError as exc:
        lines = ["Order cannot be placed, not enough stock:"]
        for shortfall in exc.report:
            lines.append(
                f"  {shortfall.name}: available {shortfall.available}, "
                f"needed {shortfall.needed}"
            )
        raise click.ClickException("\n".join(lines))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(to_order_dto(order))


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
def order_list() -> None:
    """List orders, newest first."""
    orders = ListOrdersHandler(order_repo=order_repository()).handle()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Status':<10} {'Lines':>5}  {'Created'}")
    click.echo("-" * 45)
    for dto in orders:
        click.echo(f"{dto.id:<6} {dto.status:<10} {len(dto.lines):>5}  {dto.created_at}")


@click.command("discard")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to discard.")
def order_discard(order_id: int) -> None:
    """Discard an order (returns its ingredients to stock)."""
    handler = DiscardOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        stock_repo=stock_repository(),
        ledger=stock_ledger(),
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} discarded, stock returned.")


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
def order_delete(order_id: int) -> None:
    """Delete a discarded order."""
    handler = DeleteOrderHandler(order_repo=order_repository())

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} deleted.")
