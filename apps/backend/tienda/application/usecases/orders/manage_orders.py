"""
===============================================================================
USE CASES: Fulfillment orders (create / list / stats / get / update status)
===============================================================================

Business Goal:
    Vista interna de preparación de pedidos ya pagados, con su propio
    vocabulario de estados y el mismo ledger genérico que las transacciones.

Reglas:
    - create: ítems no vacíos, precio >= 0, cantidad > 0; total = suma de
      subtotales; historial sembrado con `pending`.
    - list: filtro por estado (`all` = sin filtro) y rango de fechas.
    - stats: totalSales y monthSales excluyen `cancelled`; top 5 productos
      por cantidad vendida. Se calcula en memoria por request.
    - update_status: estado fuera del vocabulario -> VALIDATION_ERROR.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Collaborators:
    - OrderRepository: create, get, list_orders, append_status
    - domain.ledger: StatusLedger[OrderStatus], parse_status
===============================================================================
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID, uuid4

from ....domain.entities import Order, OrderItem
from ....domain.ledger import (
    InvalidStatusError,
    OrderStatus,
    StatusLedger,
    as_utc,
    parse_status,
    utcnow,
)
from ....domain.repositories import OrderFilters, OrderRepository
from ....identity.users import User
from .order_results import (
    OrderListResult,
    OrderResult,
    OrderStats,
    TopProduct,
    order_not_found,
    order_validation_error,
)

TOP_PRODUCTS_LIMIT = 5


@dataclass(frozen=True)
class CreateOrderInput:
    user: User
    items: Sequence[OrderItem]
    payment_id: str
    payment_status: str
    payment_method: str | None = None


class CreateOrderUseCase:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._orders = order_repository

    def execute(self, input_data: CreateOrderInput) -> OrderResult:
        items = list(input_data.items)
        if not items:
            return OrderResult(error=order_validation_error("El pedido no tiene ítems."))
        if any(item.price < 0 or item.quantity <= 0 for item in items):
            return OrderResult(
                error=order_validation_error(
                    "Cada ítem debe tener precio >= 0 y cantidad positiva."
                )
            )
        if not (input_data.payment_id or "").strip():
            return OrderResult(error=order_validation_error("paymentId es obligatorio."))

        user = input_data.user
        order = Order(
            id=uuid4(),
            user_id=user.id,
            user_email=user.email,
            user_name=user.name or user.email,
            items=items,
            total=sum(item.subtotal for item in items),
            ledger=StatusLedger.opened_with(OrderStatus, OrderStatus.PENDING),
            payment_id=input_data.payment_id.strip(),
            payment_status=input_data.payment_status,
            payment_method=input_data.payment_method,
        )
        return OrderResult(order=self._orders.create(order))


class ListOrdersUseCase:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._orders = order_repository

    def execute(
        self,
        *,
        status: Any = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> OrderListResult:
        parsed = None
        if status and str(status).strip().lower() != "all":
            try:
                parsed = parse_status(OrderStatus, status)
            except InvalidStatusError as exc:
                return OrderListResult(error=order_validation_error(str(exc)))
        return OrderListResult(
            orders=self._orders.list_orders(
                OrderFilters(status=parsed, start=as_utc(start), end=as_utc(end))
            )
        )


class OrderStatsUseCase:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._orders = order_repository

    def execute(self, *, now: datetime | None = None) -> OrderStats:
        orders = self._orders.list_orders(OrderFilters())
        now = as_utc(now) or utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        billable = [o for o in orders if o.status != OrderStatus.CANCELLED]
        by_status = Counter(o.status.value for o in orders)

        quantities: Counter[str] = Counter()
        revenue: defaultdict[str, float] = defaultdict(float)
        first_seen: dict[str, OrderItem] = {}
        for order in orders:
            for item in order.items:
                quantities[item.product_id] += item.quantity
                revenue[item.product_id] += item.subtotal
                first_seen.setdefault(item.product_id, item)

        top = [
            TopProduct(
                product_id=product_id,
                name=first_seen[product_id].name,
                brand=first_seen[product_id].brand,
                total_quantity=quantity,
                total_revenue=revenue[product_id],
            )
            for product_id, quantity in quantities.most_common(TOP_PRODUCTS_LIMIT)
        ]

        return OrderStats(
            total_sales=sum(o.total for o in billable),
            total_orders=len(orders),
            month_sales=sum(
                o.total
                for o in billable
                if o.created_at is not None and o.created_at >= month_start
            ),
            orders_by_status=dict(by_status),
            top_products=top,
        )


class GetOrderUseCase:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._orders = order_repository

    def execute(self, order_id: UUID) -> OrderResult:
        order = self._orders.get(order_id)
        if order is None:
            return OrderResult(error=order_not_found())
        return OrderResult(order=order)


class UpdateOrderStatusUseCase:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._orders = order_repository

    def execute(
        self, order_id: UUID, status: Any, *, actor_id: UUID | None
    ) -> OrderResult:
        existing = self._orders.get(order_id)
        if existing is None:
            return OrderResult(error=order_not_found())
        try:
            change = existing.ledger.change_for(status, changed_by=actor_id)
        except InvalidStatusError as exc:
            return OrderResult(error=order_validation_error(str(exc)))

        updated = self._orders.append_status(order_id, change)
        if updated is None:
            return OrderResult(error=order_not_found())
        return OrderResult(order=updated)
