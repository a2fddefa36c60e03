"""
Catalog use cases.
"""

from .catalog_results import (
    CatalogError,
    CatalogErrorCode,
    DeleteProductResult,
    ProductListResult,
    ProductResult,
)
from .create_product import CreateProductInput, CreateProductUseCase
from .delete_product import DeleteProductUseCase
from .list_products import (
    MIN_SEARCH_LENGTH,
    PUBLIC_LIST_LIMIT,
    GetProductUseCase,
    ListAllProductsUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
)
from .update_product import UpdateProductUseCase

__all__ = [
    "CatalogError",
    "CatalogErrorCode",
    "CreateProductInput",
    "CreateProductUseCase",
    "DeleteProductResult",
    "DeleteProductUseCase",
    "GetProductUseCase",
    "ListAllProductsUseCase",
    "ListProductsUseCase",
    "MIN_SEARCH_LENGTH",
    "PUBLIC_LIST_LIMIT",
    "ProductListResult",
    "ProductResult",
    "SearchProductsUseCase",
    "UpdateProductUseCase",
]
