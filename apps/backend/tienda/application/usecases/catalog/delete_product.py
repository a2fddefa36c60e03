"""USE CASE: Delete Product."""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import ProductRepository
from .catalog_results import DeleteProductResult, product_not_found


class DeleteProductUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self, product_id: UUID) -> DeleteProductResult:
        if not self._products.delete(product_id):
            return DeleteProductResult(error=product_not_found())
        return DeleteProductResult(deleted=True)
