"""
Fulfillment order use cases.
"""

from .manage_orders import (
    CreateOrderInput,
    CreateOrderUseCase,
    GetOrderUseCase,
    ListOrdersUseCase,
    OrderStatsUseCase,
    UpdateOrderStatusUseCase,
)
from .order_results import (
    OrderError,
    OrderErrorCode,
    OrderListResult,
    OrderResult,
    OrderStats,
    TopProduct,
)

__all__ = [
    "CreateOrderInput",
    "CreateOrderUseCase",
    "GetOrderUseCase",
    "ListOrdersUseCase",
    "OrderError",
    "OrderErrorCode",
    "OrderListResult",
    "OrderResult",
    "OrderStats",
    "OrderStatsUseCase",
    "TopProduct",
    "UpdateOrderStatusUseCase",
]
