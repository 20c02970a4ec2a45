"""Application service: Add Product use case."""

from __future__ import annotations

from posinv.application.dto import IngredientSpec
from posinv.domain.exceptions import StockItemNotFoundError, ValidationError
from posinv.domain.model.product import Ingredient, Product
from posinv.domain.model.value_objects import to_decimal
from posinv.domain.repository.product_repository import ProductRepository
from posinv.domain.repository.stock_repository import StockRepository


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        stock_repo: StockRepository,
    ) -> None:
        self._product_repo = product_repo
        self._stock_repo = stock_repo

    def handle(self, name: str, ingredient_specs: list[IngredientSpec]) -> Product:
        """Add a new product to the catalog.

        Every ingredient must point at an existing stock item; the
        ingredient's unit is taken from that stock item.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        existing = self._product_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Product '{name}' already exists")

        product = Product.create(
            id=None,
            name=name,
            ingredients=build_ingredients(ingredient_specs, self._stock_repo),
        )
        return self._product_repo.create(product)


def build_ingredients(
    specs: list[IngredientSpec], stock_repo: StockRepository
) -> list[Ingredient]:
    """Turn ingredient specs into Ingredients, checking each stock item exists."""
    ingredients: list[Ingredient] = []
    for spec in specs:
        stock_item = stock_repo.get(spec.stock_item_id)
        if stock_item is None:
            raise StockItemNotFoundError(spec.stock_item_id)
        ingredients.append(
            Ingredient(
                stock_item_id=stock_item.id,  # type: ignore[arg-type]
                unit=stock_item.unit,
                quantity_required=to_decimal(spec.quantity_required, "Quantity required"),
            )
        )
    return ingredients
