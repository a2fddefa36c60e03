"""Schemas HTTP de pedidos de fulfillment."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from tienda.domain.entities import Order
from tienda.domain.ledger import OrderStatus

from .base import CamelModel


class OrderItemReq(CamelModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=300)
    brand: str = Field(..., min_length=1, max_length=32)
    price: float
    quantity: int


class CreateOrderReq(CamelModel):
    items: list[OrderItemReq]
    payment_id: str = Field(..., max_length=200)
    payment_status: str = Field(..., max_length=32)
    payment_method: str | None = Field(default=None, max_length=64)


class UpdateOrderStatusReq(CamelModel):
    status: str | None = None


class OrderItemRes(CamelModel):
    product_id: str
    name: str
    brand: str
    price: float
    quantity: int
    subtotal: float


class OrderStatusChangeRes(CamelModel):
    status: OrderStatus
    changed_at: datetime
    changed_by: UUID | None = None
    note: str | None = None


class OrderRes(CamelModel):
    id: UUID
    user_id: UUID
    user_email: str
    user_name: str
    items: list[OrderItemRes]
    total: float
    status: OrderStatus
    status_history: list[OrderStatusChangeRes]
    payment_id: str
    payment_status: str
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrdersListRes(CamelModel):
    orders: list[OrderRes]


class TopProductRes(CamelModel):
    product_id: str
    name: str
    brand: str
    total_quantity: int
    total_revenue: float


class OrderStatsRes(CamelModel):
    total_sales: float
    total_orders: int
    month_sales: float
    orders_by_status: dict[str, int]
    top_products: list[TopProductRes]


def to_order_res(order: Order) -> OrderRes:
    return OrderRes(
        id=order.id,
        user_id=order.user_id,
        user_email=order.user_email,
        user_name=order.user_name,
        items=[
            OrderItemRes(
                product_id=item.product_id,
                name=item.name,
                brand=item.brand,
                price=item.price,
                quantity=item.quantity,
                subtotal=item.subtotal,
            )
            for item in order.items
        ],
        total=order.total,
        status=order.status,
        status_history=[
            OrderStatusChangeRes(
                status=entry.status,
                changed_at=entry.changed_at,
                changed_by=entry.changed_by,
                note=entry.note,
            )
            for entry in order.status_history
        ],
        payment_id=order.payment_id,
        payment_status=order.payment_status,
        payment_method=order.payment_method,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
