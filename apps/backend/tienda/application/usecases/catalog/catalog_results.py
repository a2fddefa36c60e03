"""
===============================================================================
CATALOG USE CASE RESULTS
===============================================================================

Responsibilities:
    - CatalogErrorCode / CatalogError: errores tipados del catálogo.
    - ProductResult / ProductListResult / DeleteProductResult.
    - Normalización y validación de campos de producto (brand, category,
      price) compartida entre alta y edición.

Collaborators:
    - domain.entities: Product, Brand, Category
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from ....domain.entities import Brand, Category, Product


class CatalogErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class CatalogError:
    code: CatalogErrorCode
    message: str
    resource: str | None = None


@dataclass
class ProductResult:
    product: Product | None = None
    error: CatalogError | None = None


@dataclass
class ProductListResult:
    products: List[Product] = field(default_factory=list)
    error: CatalogError | None = None


@dataclass
class DeleteProductResult:
    deleted: bool = False
    error: CatalogError | None = None


class ProductFieldError(ValueError):
    """Campo de producto inválido (se traduce a VALIDATION_ERROR)."""


def parse_brand(raw: Any) -> Brand:
    try:
        return Brand(str(raw).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(b.value for b in Brand)
        raise ProductFieldError(
            f"Marca inválida. Valores permitidos: {allowed}"
        ) from exc


def parse_category(raw: Any) -> Category:
    if raw is None or str(raw).strip() == "":
        return Category.OTROS
    try:
        return Category(str(raw).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(c.value for c in Category)
        raise ProductFieldError(
            f"Categoría inválida. Valores permitidos: {allowed}"
        ) from exc


def parse_price(raw: Any) -> float:
    try:
        price = float(raw)
    except (TypeError, ValueError) as exc:
        raise ProductFieldError("El precio debe ser numérico.") from exc
    if price < 0:
        raise ProductFieldError("El precio no puede ser negativo.")
    return price


def required_text(raw: Any, label: str) -> str:
    value = str(raw).strip() if raw is not None else ""
    if not value:
        raise ProductFieldError(f"El campo {label} es obligatorio.")
    return value


def validation_error(message: str) -> CatalogError:
    return CatalogError(CatalogErrorCode.VALIDATION_ERROR, message)


def product_not_found() -> CatalogError:
    return CatalogError(
        CatalogErrorCode.NOT_FOUND, "Producto no encontrado.", resource="Product"
    )
