"""Abstract repository for the product catalog.

Products are recipes. Placing an order reads them once and copies the
recipe onto the order line; discarding only comes back here for lines
that carry no copy, and must cope with the product being gone.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from posinv.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def create(self, product: Product) -> Product:
        """Persist a new product under the next free ID and return it."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Insert the product, or replace the one with the same ID."""

    @abstractmethod
    def remove(self, product_id: str) -> bool:
        """Delete a product. Returns False if it did not exist."""
