"""In-memory fulfillment orders (tests / CI). Thread-safe, same ordering as Postgres."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....domain.entities import Order
from ....domain.ledger import OrderStatus, StatusChange, StatusLedger, utcnow
from ....domain.repositories import OrderFilters


def _clone(order: Order) -> Order:
    return replace(
        order,
        items=list(order.items),
        ledger=StatusLedger(order.ledger.status_type, order.ledger.entries),
    )


class InMemoryOrderRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._orders: Dict[UUID, Order] = {}

    def create(self, order: Order) -> Order:
        now = utcnow()
        stored = _clone(order)
        stored.created_at = stored.created_at or now
        stored.updated_at = stored.updated_at or now
        with self._lock:
            self._orders[stored.id] = stored
            return _clone(stored)

    def get(self, order_id: UUID) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return _clone(order) if order else None

    def list_orders(self, filters: OrderFilters) -> list[Order]:
        with self._lock:
            values = [_clone(o) for o in self._orders.values()]

        def predicate(o: Order) -> bool:
            if filters.status is not None and o.status != filters.status:
                return False
            if filters.start is not None and (o.created_at is None or o.created_at < filters.start):
                return False
            if filters.end is not None and (o.created_at is None or o.created_at > filters.end):
                return False
            return True

        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            (o for o in values if predicate(o)),
            key=lambda o: o.created_at or oldest,
            reverse=True,
        )

    def append_status(
        self, order_id: UUID, change: StatusChange[OrderStatus]
    ) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            order.apply_status(change)
            return _clone(order)
