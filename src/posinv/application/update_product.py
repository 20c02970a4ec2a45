"""Application service: Update Product use case."""

from __future__ import annotations

from posinv.application.add_product import build_ingredients
from posinv.application.dto import IngredientSpec
from posinv.domain.exceptions import ProductNotFoundError, ValidationError
from posinv.domain.model.product import Product
from posinv.domain.repository.product_repository import ProductRepository
from posinv.domain.repository.stock_repository import StockRepository


class UpdateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        stock_repo: StockRepository,
    ) -> None:
        self._product_repo = product_repo
        self._stock_repo = stock_repo

    def handle(
        self,
        product_id: str,
        name: str | None = None,
        ingredient_specs: list[IngredientSpec] | None = None,
    ) -> Product:
        """Rename a product and/or replace its recipe.

        This does NOT affect existing orders: each order line carries the
        recipe it was placed with.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        if name is not None:
            clash = self._product_repo.get_by_name(name.strip())
            if clash is not None and clash.id != product_id:
                raise ValidationError(f"Product '{name}' already exists")

        updated = Product.create(
            id=product.id,
            name=product.name if name is None else name,
            ingredients=(
                product.ingredients
                if ingredient_specs is None
                else build_ingredients(ingredient_specs, self._stock_repo)
            ),
        )
        self._product_repo.save(updated)
        return updated
