"""
Schemas HTTP del catálogo.

brand/category/price llegan sin tipar estrictamente: la normalización
(minúsculas, enum, price >= 0) vive en el caso de uso para devolver el
mismo error de validación en alta y edición.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from tienda.domain.entities import Brand, Category

from .base import CamelModel


class CreateProductReq(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    price: Any = None
    image: str | None = Field(default=None, max_length=1000)
    brand: str | None = Field(default=None, max_length=32)
    category: str | None = Field(default=None, max_length=32)


class UpdateProductReq(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    price: Any = None
    image: str | None = Field(default=None, max_length=1000)
    brand: str | None = Field(default=None, max_length=32)
    category: str | None = Field(default=None, max_length=32)


class ProductRes(CamelModel):
    id: UUID
    name: str
    description: str | None = None
    price: float
    image: str
    brand: Brand
    category: Category
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeleteProductRes(CamelModel):
    message: str
    id: UUID
