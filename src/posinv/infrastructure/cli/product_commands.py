"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from posinv.application.add_product import AddProductHandler
from posinv.application.dto import IngredientSpec
from posinv.application.remove_product import RemoveProductHandler
from posinv.application.show_products import ShowProductHandler, ShowProductsHandler
from posinv.application.update_product import UpdateProductHandler
from posinv.domain.exceptions import DomainException
from posinv.infrastructure.bootstrap import product_repository, stock_repository


def _parse_ingredients(raw: str) -> list[IngredientSpec]:
    """Parse '1:0.02,3:0.5' into IngredientSpec list."""
    specs: list[IngredientSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid ingredient format '{pair}'. Expected 'StockItemId:Quantity'."
            )
        stock_item_id, qty = pair.rsplit(":", 1)
        specs.append(
            IngredientSpec(stock_item_id=stock_item_id.strip(), quantity_required=qty.strip())
        )
    return specs


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option(
    "--ingredients", required=True, help="Ingredients as 'StockItemId:Qty,StockItemId:Qty'."
)
def product_add(name: str, ingredients: str) -> None:
    """Add a new product to the catalog."""
    specs = _parse_ingredients(ingredients)
    handler = AddProductHandler(
        product_repo=product_repository(),
        stock_repo=stock_repository(),
    )

    try:
        product = handler.handle(name=name, ingredient_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added "
        f"with {len(product.ingredients)} ingredient(s)"
    )


@click.command("list")
def product_list() -> None:
    """List all products with their current cost."""
    handler = ShowProductsHandler(
        product_repo=product_repository(),
        stock_repo=stock_repository(),
    )
    products = handler.handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Ingredients':>12} {'Cost':>10}")
    click.echo("-" * 51)
    for p in products:
        cost = p.cost if p.cost is not None else "n/a"
        click.echo(f"{p.id:<6} {p.name:<20} {p.ingredient_count:>12} {cost:>10}")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show a product and its recipe."""
    handler = ShowProductHandler(
        product_repo=product_repository(),
        stock_repo=stock_repository(),
    )

    try:
        p = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{p.id}  {p.name}  (cost {p.cost or 'n/a'})")
    click.echo()
    click.echo(f"  {'Stock item':<20} {'Qty':>10} {'Unit':<8}")
    click.echo(f"  {'-'*40}")
    for line in p.ingredients:
        label = line.stock_item_name or f"#{line.stock_item_id} (missing)"
        click.echo(f"  {label:<20} {line.quantity_required:>10} {line.unit:<8}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New product name.")
@click.option(
    "--ingredients", default=None, help="New recipe as 'StockItemId:Qty,StockItemId:Qty'."
)
def product_update(product_id: str, name: str | None, ingredients: str | None) -> None:
    """Rename a product or replace its recipe."""
    specs = None if ingredients is None else _parse_ingredients(ingredients)
    handler = UpdateProductHandler(
        product_repo=product_repository(),
        stock_repo=stock_repository(),
    )

    try:
        product = handler.handle(product_id, name=name, ingredient_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' updated")


@click.command("remove")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_remove(product_id: str) -> None:
    """Delete a product. Placed orders keep their recipe."""
    handler = RemoveProductHandler(product_repo=product_repository())

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} removed.")
