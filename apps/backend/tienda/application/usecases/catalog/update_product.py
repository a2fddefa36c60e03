"""
USE CASE: Update Product

Edición parcial: solo se validan y persisten los campos presentes.
Mismas reglas de brand/category/price que el alta.
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from ....domain.repositories import ProductRepository
from .catalog_results import (
    ProductFieldError,
    ProductResult,
    parse_brand,
    parse_category,
    parse_price,
    product_not_found,
    required_text,
    validation_error,
)


class UpdateProductUseCase:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._products = product_repository

    def execute(self, product_id: UUID, changes: Mapping[str, Any]) -> ProductResult:
        try:
            normalized = self._normalize(changes)
        except ProductFieldError as exc:
            return ProductResult(error=validation_error(str(exc)))

        if not normalized:
            existing = self._products.get(product_id)
            if existing is None:
                return ProductResult(error=product_not_found())
            return ProductResult(product=existing)

        updated = self._products.update(product_id, normalized)
        if updated is None:
            return ProductResult(error=product_not_found())
        return ProductResult(product=updated)

    @staticmethod
    def _normalize(changes: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if changes.get("name") is not None:
            out["name"] = required_text(changes["name"], "name")
        if changes.get("image") is not None:
            out["image"] = required_text(changes["image"], "image")
        if changes.get("price") is not None:
            out["price"] = parse_price(changes["price"])
        if changes.get("brand") is not None:
            out["brand"] = parse_brand(changes["brand"])
        if changes.get("category") is not None:
            out["category"] = parse_category(changes["category"])
        if "description" in changes:
            out["description"] = (changes["description"] or "").strip() or None
        return out
