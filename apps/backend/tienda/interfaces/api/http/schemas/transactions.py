"""
===============================================================================
TARJETA CRC — schemas/transactions.py
===============================================================================

Módulo:
    Schemas HTTP del ledger de transacciones

Responsabilidades:
    - Proyección de Transaction (con historial de estado y de envío).
    - Requests de back-office (status / notes / shipping).
    - Respuestas de listados paginados, estadísticas y "mis pedidos".

Notas:
    - Los ítems mantienen `unit_price` (formato del proveedor de pagos).
    - "Mis pedidos" omite webhookData y el autor de cada cambio.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from tienda.domain.entities import Transaction
from tienda.domain.ledger import ShippingStatus, TransactionStatus
from tienda.domain.repositories import StatusAggregate

from .base import CamelModel


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class UpdateStatusReq(CamelModel):
    status: Any = None
    note: str | None = Field(default=None, max_length=1000)


class UpdateNotesReq(CamelModel):
    notes: str | None = Field(default=None, max_length=5000)


class UpdateShippingReq(CamelModel):
    shipping_status: str | None = Field(default=None, max_length=32)
    tracking_number: str | None = Field(default=None, max_length=200)
    note: str | None = Field(default=None, max_length=1000)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class LineItemRes(BaseModel):
    title: str
    description: str | None = None
    unit_price: float
    quantity: int
    subtotal: float


class CustomerInfoRes(CamelModel):
    email: str | None = None
    name: str | None = None
    phone: str | None = None


class StatusChangeRes(CamelModel):
    status: TransactionStatus
    changed_at: datetime
    changed_by: UUID | None = None
    note: str | None = None


class ShippingChangeRes(CamelModel):
    shipping_status: ShippingStatus | None = None
    tracking_number: str | None = None
    changed_at: datetime
    changed_by: UUID | None = None
    note: str | None = None


class TransactionRes(CamelModel):
    id: UUID
    transaction_id: str
    payment_id: str | None = None
    user_id: UUID | None = None
    customer_info: CustomerInfoRes
    items: list[LineItemRes]
    amount: float
    status: TransactionStatus
    status_history: list[StatusChangeRes]
    payment_method: str | None = None
    payment_type: str | None = None
    notes: str | None = None
    webhook_data: dict[str, Any] | None = None
    shipping_status: ShippingStatus | None = None
    tracking_number: str | None = None
    shipping_history: list[ShippingChangeRes] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TransactionEnvelopeRes(CamelModel):
    message: str | None = None
    transaction: TransactionRes


class PaginationRes(CamelModel):
    total: int
    limit: int
    skip: int
    has_more: bool


class TransactionsPageRes(CamelModel):
    transactions: list[TransactionRes]
    pagination: PaginationRes


class AggregateRes(CamelModel):
    count: int
    amount: float


class TotalRes(CamelModel):
    transactions: int
    amount: float


class StatsRes(CamelModel):
    total: TotalRes
    approved: TotalRes
    by_status: dict[str, AggregateRes]
    recent: list[TransactionRes]


class MyOrdersRes(CamelModel):
    orders: list[TransactionRes]
    stats: dict[str, int]


class MyOrderRes(CamelModel):
    order: TransactionRes


def to_transaction_res(tx: Transaction, *, for_owner: bool = False) -> TransactionRes:
    """Mapea entidad -> DTO. for_owner oculta webhookData y autores."""
    return TransactionRes(
        id=tx.id,
        transaction_id=tx.transaction_id,
        payment_id=tx.payment_id,
        user_id=tx.user_id,
        customer_info=CustomerInfoRes(
            email=tx.customer.email, name=tx.customer.name, phone=tx.customer.phone
        ),
        items=[
            LineItemRes(
                title=item.title,
                description=item.description,
                unit_price=item.unit_price,
                quantity=item.quantity,
                subtotal=item.subtotal,
            )
            for item in tx.items
        ],
        amount=tx.amount,
        status=tx.status,
        status_history=[
            StatusChangeRes(
                status=entry.status,
                changed_at=entry.changed_at,
                changed_by=None if for_owner else entry.changed_by,
                note=entry.note,
            )
            for entry in tx.status_history
        ],
        payment_method=tx.payment_method,
        payment_type=tx.payment_type,
        notes=tx.notes,
        webhook_data=None if for_owner else tx.webhook_data,
        shipping_status=tx.shipping_status,
        tracking_number=tx.tracking_number,
        shipping_history=[
            ShippingChangeRes(
                shipping_status=change.shipping_status,
                tracking_number=change.tracking_number,
                changed_at=change.changed_at,
                changed_by=None if for_owner else change.changed_by,
                note=change.note,
            )
            for change in tx.shipping_history
        ],
        created_at=tx.created_at,
        updated_at=tx.updated_at,
    )


def to_total_res(aggregate: StatusAggregate) -> TotalRes:
    return TotalRes(transactions=aggregate.count, amount=aggregate.amount)
