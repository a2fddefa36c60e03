"""
Schemas HTTP de pagos.

Los ítems siguen el formato del proveedor (snake_case `unit_price`); la
validación de cada ítem vive en el caso de uso.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .base import CamelModel
from .transactions import TransactionRes


class CreatePaymentReq(CamelModel):
    items: list[dict[str, Any]] | None = None
    success_redirect: str | None = Field(default=None, max_length=2000)
    failure_redirect: str | None = Field(default=None, max_length=2000)


class CreatePaymentRes(BaseModel):
    payment_url: str
    payment_id: str


class WebhookAckRes(BaseModel):
    received: bool = True


class LineItemReq(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    unit_price: float = Field(..., ge=0)
    quantity: int = Field(..., gt=0)
    description: str | None = Field(default=None, max_length=1000)


class CreateTestOrderReq(CamelModel):
    items: list[LineItemReq] | None = None


class CreateTestOrderRes(CamelModel):
    message: str
    transaction: TransactionRes
