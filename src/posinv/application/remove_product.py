"""Application service: Remove Product use case.

Orders already placed keep their recipe snapshot, so they can still be
discarded and their stock returned.
"""

from __future__ import annotations

from posinv.domain.exceptions import ProductNotFoundError
from posinv.domain.repository.product_repository import ProductRepository


class RemoveProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> None:
        if not self._product_repo.remove(product_id):
            raise ProductNotFoundError(product_id)
