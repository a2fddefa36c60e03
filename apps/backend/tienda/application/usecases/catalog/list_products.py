"""
===============================================================================
USE CASES: Catalog reads (list / search / all / get)
===============================================================================

Reglas:
    - Listado público: más recientes primero, tope PUBLIC_LIST_LIMIT,
      filtro opcional por marca (marca inválida -> VALIDATION_ERROR).
    - Búsqueda: query de menos de MIN_SEARCH_LENGTH caracteres -> lista vacía.
    - `all` (panel admin): sin tope.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import ProductRepository
from .catalog_results import (
    ProductFieldError,
    ProductListResult,
    ProductResult,
    parse_brand,
    product_not_found,
    validation_error,
)

PUBLIC_LIST_LIMIT = 50
SEARCH_LIMIT = 50
MIN_SEARCH_LENGTH = 2


class ListProductsUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self, brand: str | None = None) -> ProductListResult:
        parsed = None
        if brand:
            try:
                parsed = parse_brand(brand)
            except ProductFieldError as exc:
                return ProductListResult(error=validation_error(str(exc)))
        return ProductListResult(
            products=self._products.list_products(brand=parsed, limit=PUBLIC_LIST_LIMIT)
        )


class ListAllProductsUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self) -> ProductListResult:
        return ProductListResult(products=self._products.list_products())


class SearchProductsUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self, query: str | None) -> ProductListResult:
        text = (query or "").strip()
        if len(text) < MIN_SEARCH_LENGTH:
            return ProductListResult(products=[])
        return ProductListResult(products=self._products.search(text, limit=SEARCH_LIMIT))


class GetProductUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self, product_id: UUID) -> ProductResult:
        product = self._products.get(product_id)
        if product is None:
            return ProductResult(error=product_not_found())
        return ProductResult(product=product)
