"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from posinv.domain.model.product import Ingredient, Product
from posinv.domain.repository.product_repository import ProductRepository
from posinv.infrastructure.persistence.json_file import JsonFile, next_id


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for product in self._load().values():
            if product.name.lower() == name.lower():
                return product
        return None

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def create(self, product: Product) -> Product:
        with self._file.locked():
            products = self._load()
            product.id = next_id(products)
            products[product.id] = product
            self._file.persist([self._to_raw(p) for p in products.values()])
        return product

    def save(self, product: Product) -> None:
        with self._file.locked():
            products = self._load()
            products[product.id] = product
            self._file.persist([self._to_raw(p) for p in products.values()])

    def remove(self, product_id: str) -> bool:
        with self._file.locked():
            products = self._load()
            if products.pop(product_id, None) is None:
                return False
            self._file.persist([self._to_raw(p) for p in products.values()])
            return True

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        return {raw["id"]: self._to_domain(raw) for raw in self._file.load()}

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "ingredients": [ingredient_to_raw(i) for i in product.ingredients],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            ingredients=[ingredient_from_raw(i) for i in raw.get("ingredients", [])],
        )


def ingredient_to_raw(ingredient: Ingredient) -> dict:
    return {
        "stock_item_id": ingredient.stock_item_id,
        "unit": ingredient.unit,
        "quantity_required": str(ingredient.quantity_required),
    }


def ingredient_from_raw(raw: dict) -> Ingredient:
    return Ingredient(
        stock_item_id=raw["stock_item_id"],
        unit=raw["unit"],
        quantity_required=Decimal(raw["quantity_required"]),
    )
