"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/order.py
============================================================
Class: PostgresOrderRepository

Responsibilities:
  - Persistir pedidos de fulfillment en la tabla `orders`.
  - Transición de estado atómica (mismo patrón que transactions).
  - Listado filtrado por estado y rango de fechas.

Collaborators:
  - postgres.base.PostgresRepository
  - domain.entities.Order / OrderItem
  - domain.ledger.StatusLedger / OrderStatus
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from psycopg.types.json import Jsonb

from ....domain.entities import Order, OrderItem
from ....domain.ledger import OrderStatus, StatusChange, StatusLedger, utcnow
from ....domain.repositories import OrderFilters
from .base import PostgresRepository

_ORDER_COLUMNS = """
    id, user_id, user_email, user_name, items, total, status, status_history,
    payment_id, payment_status, payment_method, created_at, updated_at
"""


def _row_to_order(row: tuple) -> Order:
    return Order(
        id=row[0],
        user_id=row[1],
        user_email=row[2],
        user_name=row[3],
        items=[OrderItem.from_dict(i) for i in (row[4] or [])],
        total=float(row[5]),
        ledger=StatusLedger.from_list(OrderStatus, row[7]),
        payment_id=row[8],
        payment_status=row[9],
        payment_method=row[10],
        created_at=row[11],
        updated_at=row[12],
    )


class PostgresOrderRepository(PostgresRepository):
    def create(self, order: Order) -> Order:
        now = utcnow()
        row = self._fetchone(
            query=f"""
                INSERT INTO orders (
                    id, user_id, user_email, user_name, items, total, status,
                    status_history, payment_id, payment_status, payment_method,
                    created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {_ORDER_COLUMNS}
            """,
            params=(
                order.id,
                order.user_id,
                order.user_email,
                order.user_name,
                Jsonb([i.to_dict() for i in order.items]),
                order.total,
                order.status.value,
                Jsonb(order.ledger.to_list()),
                order.payment_id,
                order.payment_status,
                order.payment_method,
                order.created_at or now,
                order.updated_at or now,
            ),
            context_msg="PostgresOrderRepository: create failed",
            extra={"order_id": str(order.id)},
        )
        return _row_to_order(row)

    def get(self, order_id: UUID) -> Optional[Order]:
        row = self._fetchone(
            query=f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = %s",
            params=(order_id,),
            context_msg="PostgresOrderRepository: get failed",
            extra={"order_id": str(order_id)},
        )
        return _row_to_order(row) if row else None

    def list_orders(self, filters: OrderFilters) -> list[Order]:
        conditions: list[str] = []
        params: list[object] = []
        if filters.status is not None:
            conditions.append("status = %s")
            params.append(filters.status.value)
        if filters.start is not None:
            conditions.append("created_at >= %s")
            params.append(filters.start)
        if filters.end is not None:
            conditions.append("created_at <= %s")
            params.append(filters.end)

        where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = self._fetchall(
            query=f"""
                SELECT {_ORDER_COLUMNS}
                FROM orders
                {where_sql}
                ORDER BY created_at DESC, id DESC
            """,
            params=params,
            context_msg="PostgresOrderRepository: list failed",
            extra={"filters": len(conditions)},
        )
        return [_row_to_order(r) for r in rows]

    def append_status(
        self, order_id: UUID, change: StatusChange[OrderStatus]
    ) -> Optional[Order]:
        row = self._fetchone(
            query=f"""
                UPDATE orders
                SET status = %s,
                    status_history = status_history || %s,
                    updated_at = %s
                WHERE id = %s
                RETURNING {_ORDER_COLUMNS}
            """,
            params=(
                change.status.value,
                Jsonb([change.to_dict()]),
                change.changed_at,
                order_id,
            ),
            context_msg="PostgresOrderRepository: append_status failed",
            extra={"order_id": str(order_id), "status": change.status.value},
        )
        return _row_to_order(row) if row else None
