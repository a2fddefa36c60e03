"""
===============================================================================
USE CASE: Create Product
===============================================================================

Reglas:
    - name, price, image y brand obligatorios.
    - brand y category se pasan a minúsculas antes de validar contra el enum.
    - category ausente -> `otros`.
    - price >= 0.
    - La autorización (CATALOG_MANAGE) se resuelve en el borde HTTP.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from ....domain.entities import Product
from ....domain.repositories import ProductRepository
from .catalog_results import (
    ProductFieldError,
    ProductResult,
    parse_brand,
    parse_category,
    parse_price,
    required_text,
    validation_error,
)


@dataclass(frozen=True)
class CreateProductInput:
    name: Any
    price: Any
    image: Any
    brand: Any
    category: Any = None
    description: str | None = None


class CreateProductUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self, input_data: CreateProductInput) -> ProductResult:
        if input_data.price is None:
            return ProductResult(error=validation_error("El campo price es obligatorio."))
        try:
            product = Product(
                id=uuid4(),
                name=required_text(input_data.name, "name"),
                price=parse_price(input_data.price),
                image=required_text(input_data.image, "image"),
                brand=parse_brand(input_data.brand),
                category=parse_category(input_data.category),
                description=(input_data.description or "").strip() or None,
            )
        except ProductFieldError as exc:
            return ProductResult(error=validation_error(str(exc)))

        return ProductResult(product=self._products.create(product))
