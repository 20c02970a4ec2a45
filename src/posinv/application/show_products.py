"""Application service: Show Products use cases (queries).

Product cost is computed on the fly from current stock costs.
"""

from __future__ import annotations

from typing import Mapping

from posinv.application.dto import IngredientLineDTO, ProductDTO
from posinv.domain.exceptions import ProductNotFoundError
from posinv.domain.model.product import Product
from posinv.domain.model.stock import StockItem
from posinv.domain.repository.product_repository import ProductRepository
from posinv.domain.repository.stock_repository import StockRepository


class ShowProductsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        stock_repo: StockRepository,
    ) -> None:
        self._product_repo = product_repo
        self._stock_repo = stock_repo

    def handle(self) -> list[ProductDTO]:
        stock_items = {item.id: item for item in self._stock_repo.list_all()}
        return [
            _to_dto(product, stock_items)  # type: ignore[arg-type]
            for product in self._product_repo.list_all()
        ]


class ShowProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        stock_repo: StockRepository,
    ) -> None:
        self._product_repo = product_repo
        self._stock_repo = stock_repo

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        stock_items = {}
        for ingredient in product.ingredients:
            item = self._stock_repo.get(ingredient.stock_item_id)
            if item is not None:
                stock_items[ingredient.stock_item_id] = item
        return _to_dto(product, stock_items)


def _to_dto(product: Product, stock_items: Mapping[str, StockItem]) -> ProductDTO:
    cost = product.cost(stock_items)
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        ingredient_count=len(product.ingredients),
        cost=None if cost is None else str(cost),
        ingredients=[
            IngredientLineDTO(
                stock_item_id=ingredient.stock_item_id,
                # None when the stock item has been removed
                stock_item_name=(
                    stock_items[ingredient.stock_item_id].name
                    if ingredient.stock_item_id in stock_items
                    else None
                ),
                quantity_required=str(ingredient.quantity_required),
                unit=ingredient.unit,
            )
            for ingredient in product.ingredients
        ],
    )
