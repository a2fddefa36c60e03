"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/transaction.py
============================================================
Class: PostgresTransactionRepository

Responsibilities:
  - Persistir el ledger de transacciones en la tabla `transactions`.
  - Aplicar transiciones de estado en UN solo UPDATE:
      status = nuevo, status_history = status_history || [entrada]
  - Garantizar unicidad de transaction_id (uq_transactions_transaction_id).
  - Consultas paginadas, agregados por estado y vista "mis pedidos".

Collaborators:
  - postgres.base.PostgresRepository
  - domain.entities.Transaction / LineItem / CustomerInfo / ShippingChange
  - domain.ledger.StatusLedger / StatusChange

Constraints / Notes:
  - Un lector nunca ve status y status_history desincronizados: ambos se
    escriben en la misma fila y en el mismo statement.
  - only_if_changed agrega `AND status <> nuevo` al WHERE (webhooks
    redelivered no duplican historial).
  - Orden: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from psycopg.types.json import Jsonb

from ....domain.entities import (
    CustomerInfo,
    LineItem,
    ShippingChange,
    Transaction,
)
from ....domain.ledger import (
    ShippingStatus,
    StatusChange,
    StatusLedger,
    TransactionStatus,
    utcnow,
)
from ....domain.repositories import StatusAggregate, TransactionFilters
from .base import PostgresRepository, like_pattern

_TX_COLUMNS = """
    id, transaction_id, payment_id, user_id, customer, items, amount,
    status, status_history, payment_method, payment_type, notes, webhook_data,
    shipping_status, tracking_number, shipping_history, created_at, updated_at
"""

_ORDER_BY = "ORDER BY created_at DESC, id DESC"


def _row_to_transaction(row: tuple) -> Transaction:
    (
        tx_id,
        transaction_id,
        payment_id,
        user_id,
        customer,
        items,
        amount,
        _status,
        status_history,
        payment_method,
        payment_type,
        notes,
        webhook_data,
        shipping_status,
        tracking_number,
        shipping_history,
        created_at,
        updated_at,
    ) = row

    return Transaction(
        id=tx_id,
        transaction_id=transaction_id,
        payment_id=payment_id,
        user_id=user_id,
        customer=CustomerInfo.from_dict(customer),
        items=[LineItem.from_dict(i) for i in (items or [])],
        amount=float(amount),
        ledger=StatusLedger.from_list(TransactionStatus, status_history),
        payment_method=payment_method,
        payment_type=payment_type,
        notes=notes,
        webhook_data=webhook_data,
        shipping_status=ShippingStatus(shipping_status) if shipping_status else None,
        tracking_number=tracking_number,
        shipping_history=[ShippingChange.from_dict(c) for c in (shipping_history or [])],
        created_at=created_at,
        updated_at=updated_at,
    )


def _date_conditions(
    start: datetime | None, end: datetime | None
) -> tuple[list[str], list[object]]:
    conditions: list[str] = []
    params: list[object] = []
    if start is not None:
        conditions.append("created_at >= %s")
        params.append(start)
    if end is not None:
        conditions.append("created_at <= %s")
        params.append(end)
    return conditions, params


def _where(conditions: list[str]) -> str:
    return f"WHERE {' AND '.join(conditions)}" if conditions else ""


class PostgresTransactionRepository(PostgresRepository):
    """R: Ledger de transacciones sobre PostgreSQL (JSONB para historiales)."""

    def create(self, transaction: Transaction) -> Transaction:
        now = utcnow()
        row = self._fetchone(
            query=f"""
                INSERT INTO transactions (
                    id, transaction_id, payment_id, user_id, customer, items, amount,
                    status, status_history, payment_method, payment_type, notes,
                    webhook_data, shipping_status, tracking_number, shipping_history,
                    created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                        %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {_TX_COLUMNS}
            """,
            params=(
                transaction.id,
                transaction.transaction_id,
                transaction.payment_id,
                transaction.user_id,
                Jsonb(transaction.customer.to_dict()),
                Jsonb([i.to_dict() for i in transaction.items]),
                transaction.amount,
                transaction.status.value,
                Jsonb(transaction.ledger.to_list()),
                transaction.payment_method,
                transaction.payment_type,
                transaction.notes,
                Jsonb(transaction.webhook_data) if transaction.webhook_data is not None else None,
                transaction.shipping_status.value if transaction.shipping_status else None,
                transaction.tracking_number,
                Jsonb([c.to_dict() for c in transaction.shipping_history]),
                transaction.created_at or now,
                transaction.updated_at or now,
            ),
            context_msg="PostgresTransactionRepository: create failed",
            extra={"transaction_id": transaction.transaction_id},
        )
        return _row_to_transaction(row)

    def get(self, transaction_id: UUID) -> Optional[Transaction]:
        row = self._fetchone(
            query=f"SELECT {_TX_COLUMNS} FROM transactions WHERE id = %s",
            params=(transaction_id,),
            context_msg="PostgresTransactionRepository: get failed",
            extra={"id": str(transaction_id)},
        )
        return _row_to_transaction(row) if row else None

    def find_by_external_id(self, external_id: str) -> Optional[Transaction]:
        row = self._fetchone(
            query=f"""
                SELECT {_TX_COLUMNS}
                FROM transactions
                WHERE transaction_id = %s OR payment_id = %s
                ORDER BY created_at ASC
                LIMIT 1
            """,
            params=(external_id, external_id),
            context_msg="PostgresTransactionRepository: find_by_external_id failed",
            extra={"external_id": external_id},
        )
        return _row_to_transaction(row) if row else None

    def append_status(
        self,
        transaction_id: UUID,
        change: StatusChange[TransactionStatus],
        *,
        only_if_changed: bool = False,
    ) -> Optional[Transaction]:
        guard_sql = "AND status <> %s" if only_if_changed else ""
        params: list[object] = [
            change.status.value,
            Jsonb([change.to_dict()]),
            change.changed_at,
            transaction_id,
        ]
        if only_if_changed:
            params.append(change.status.value)

        row = self._fetchone(
            query=f"""
                UPDATE transactions
                SET status = %s,
                    status_history = status_history || %s,
                    updated_at = %s
                WHERE id = %s {guard_sql}
                RETURNING {_TX_COLUMNS}
            """,
            params=params,
            context_msg="PostgresTransactionRepository: append_status failed",
            extra={"id": str(transaction_id), "status": change.status.value},
        )
        if row:
            return _row_to_transaction(row)
        # R: Sin fila: no existe, o el guard descartó un estado repetido.
        return self.get(transaction_id) if only_if_changed else None

    def update_shipping(
        self, transaction_id: UUID, change: ShippingChange
    ) -> Optional[Transaction]:
        row = self._fetchone(
            query=f"""
                UPDATE transactions
                SET shipping_status = COALESCE(%s, shipping_status),
                    tracking_number = COALESCE(%s, tracking_number),
                    shipping_history = shipping_history || %s,
                    updated_at = %s
                WHERE id = %s
                RETURNING {_TX_COLUMNS}
            """,
            params=(
                change.shipping_status.value if change.shipping_status else None,
                change.tracking_number,
                Jsonb([change.to_dict()]),
                change.changed_at,
                transaction_id,
            ),
            context_msg="PostgresTransactionRepository: update_shipping failed",
            extra={"id": str(transaction_id)},
        )
        return _row_to_transaction(row) if row else None

    def update_notes(self, transaction_id: UUID, notes: str | None) -> Optional[Transaction]:
        row = self._fetchone(
            query=f"""
                UPDATE transactions
                SET notes = %s, updated_at = %s
                WHERE id = %s
                RETURNING {_TX_COLUMNS}
            """,
            params=(notes, utcnow(), transaction_id),
            context_msg="PostgresTransactionRepository: update_notes failed",
            extra={"id": str(transaction_id)},
        )
        return _row_to_transaction(row) if row else None

    def query(
        self,
        filters: TransactionFilters,
        *,
        limit: int,
        skip: int,
    ) -> tuple[list[Transaction], int]:
        conditions, params = _date_conditions(filters.start, filters.end)

        if filters.status is not None:
            conditions.append("status = %s")
            params.append(filters.status.value)

        if filters.search and filters.search.strip():
            pattern = like_pattern(filters.search.strip())
            conditions.append(
                "(transaction_id ILIKE %s"
                " OR customer->>'email' ILIKE %s"
                " OR customer->>'name' ILIKE %s)"
            )
            params.extend([pattern, pattern, pattern])

        where_sql = _where(conditions)
        extra = {"limit": limit, "skip": skip, "filters": len(conditions)}

        count_row = self._fetchone(
            query=f"SELECT count(*) FROM transactions {where_sql}",
            params=params,
            context_msg="PostgresTransactionRepository: count failed",
            extra=extra,
        )
        rows = self._fetchall(
            query=f"""
                SELECT {_TX_COLUMNS}
                FROM transactions
                {where_sql}
                {_ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, skip],
            context_msg="PostgresTransactionRepository: query failed",
            extra=extra,
        )
        total = int(count_row[0]) if count_row else 0
        return [_row_to_transaction(r) for r in rows], total

    def aggregate_by_status(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[TransactionStatus, StatusAggregate]:
        conditions, params = _date_conditions(start, end)
        rows = self._fetchall(
            query=f"""
                SELECT status, count(*), COALESCE(sum(amount), 0)
                FROM transactions
                {_where(conditions)}
                GROUP BY status
            """,
            params=params,
            context_msg="PostgresTransactionRepository: aggregate_by_status failed",
            extra={},
        )
        result: dict[TransactionStatus, StatusAggregate] = {}
        for status, count, amount in rows:
            result[TransactionStatus(status)] = StatusAggregate(
                count=int(count), amount=float(amount)
            )
        return result

    def recent(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 5,
    ) -> list[Transaction]:
        conditions, params = _date_conditions(start, end)
        rows = self._fetchall(
            query=f"""
                SELECT {_TX_COLUMNS}
                FROM transactions
                {_where(conditions)}
                {_ORDER_BY}
                LIMIT %s
            """,
            params=[*params, limit],
            context_msg="PostgresTransactionRepository: recent failed",
            extra={"limit": limit},
        )
        return [_row_to_transaction(r) for r in rows]

    def list_for_owner(
        self,
        *,
        user_id: UUID,
        email: str | None,
        status: TransactionStatus | None = None,
        limit: int = 50,
    ) -> list[Transaction]:
        conditions = ["(user_id = %s OR lower(customer->>'email') = lower(%s))"]
        params: list[object] = [user_id, (email or "").strip()]
        if status is not None:
            conditions.append("status = %s")
            params.append(status.value)
        params.append(limit)

        rows = self._fetchall(
            query=f"""
                SELECT {_TX_COLUMNS}
                FROM transactions
                {_where(conditions)}
                {_ORDER_BY}
                LIMIT %s
            """,
            params=params,
            context_msg="PostgresTransactionRepository: list_for_owner failed",
            extra={"user_id": str(user_id)},
        )
        return [_row_to_transaction(r) for r in rows]
