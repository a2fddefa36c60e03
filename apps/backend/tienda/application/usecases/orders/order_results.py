"""
ORDER USE CASE RESULTS (vista interna de fulfillment)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from ....domain.entities import Order


class OrderErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class OrderError:
    code: OrderErrorCode
    message: str
    resource: str | None = None


@dataclass
class OrderResult:
    order: Order | None = None
    error: OrderError | None = None


@dataclass
class OrderListResult:
    orders: List[Order] = field(default_factory=list)
    error: OrderError | None = None


@dataclass(frozen=True)
class TopProduct:
    product_id: str
    name: str
    brand: str
    total_quantity: int
    total_revenue: float


@dataclass
class OrderStats:
    total_sales: float = 0.0
    total_orders: int = 0
    month_sales: float = 0.0
    orders_by_status: Dict[str, int] = field(default_factory=dict)
    top_products: List[TopProduct] = field(default_factory=list)
    error: OrderError | None = None


def order_not_found() -> OrderError:
    return OrderError(OrderErrorCode.NOT_FOUND, "Pedido no encontrado.", resource="Order")


def order_validation_error(message: str) -> OrderError:
    return OrderError(OrderErrorCode.VALIDATION_ERROR, message)
