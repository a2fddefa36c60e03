"""
===============================================================================
USE CASES: Ledger reads (query / stats / my orders)
===============================================================================

Reglas:
    - Query: filtros opcionales (estado, rango de fechas, texto), más
      recientes primero, paginación limit+skip con hasMore.
    - Stats: conteo y monto por estado (los seis estados, con ceros),
      total general, total aprobado y las 5 más recientes. Se recalcula por
      request.
    - MyOrders: transacciones cuyo userId es el del usuario O cuyo email de
      contacto coincide con el email actual del usuario.
    - GetMyOrder: 404 si no existe, 403 si no es del usuario.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from ....domain.ledger import (
    InvalidStatusError,
    TransactionStatus,
    as_utc,
    parse_status,
)
from ....domain.repositories import (
    StatusAggregate,
    TransactionFilters,
    TransactionRepository,
)
from ....identity.users import User
from .ledger_results import (
    LedgerError,
    LedgerErrorCode,
    LedgerStats,
    MyOrdersResult,
    TransactionPage,
    TransactionResult,
    transaction_not_found,
)

DEFAULT_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 500
RECENT_LIMIT = 5
MY_ORDERS_LIMIT = 50
MY_ORDERS_COUNTED = (
    TransactionStatus.PENDING,
    TransactionStatus.APPROVED,
    TransactionStatus.REJECTED,
    TransactionStatus.IN_PROCESS,
)


def _parse_optional_status(raw: Any) -> TransactionStatus | None:
    if raw is None or str(raw).strip() == "":
        return None
    return parse_status(TransactionStatus, raw)


@dataclass(frozen=True)
class QueryTransactionsInput:
    status: Any = None
    start: datetime | None = None
    end: datetime | None = None
    search: str | None = None
    limit: int = DEFAULT_PAGE_LIMIT
    skip: int = 0


class QueryTransactionsUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, input_data: QueryTransactionsInput) -> TransactionPage:
        try:
            status = _parse_optional_status(input_data.status)
        except InvalidStatusError as exc:
            return TransactionPage(
                error=LedgerError(LedgerErrorCode.VALIDATION_ERROR, str(exc))
            )

        limit = max(1, min(input_data.limit, MAX_PAGE_LIMIT))
        skip = max(0, input_data.skip)
        filters = TransactionFilters(
            status=status,
            start=as_utc(input_data.start),
            end=as_utc(input_data.end),
            search=(input_data.search or "").strip() or None,
        )
        transactions, total = self._transactions.query(filters, limit=limit, skip=skip)
        return TransactionPage(
            transactions=transactions, total=total, limit=limit, skip=skip
        )


class TransactionStatsUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(
        self, *, start: datetime | None = None, end: datetime | None = None
    ) -> LedgerStats:
        start, end = as_utc(start), as_utc(end)
        aggregates = self._transactions.aggregate_by_status(start=start, end=end)
        by_status = {
            status: aggregates.get(status, StatusAggregate()) for status in TransactionStatus
        }
        total = StatusAggregate(
            count=sum(a.count for a in by_status.values()),
            amount=sum(a.amount for a in by_status.values()),
        )
        return LedgerStats(
            by_status=by_status,
            total=total,
            approved=by_status[TransactionStatus.APPROVED],
            recent=self._transactions.recent(start=start, end=end, limit=RECENT_LIMIT),
        )


class MyOrdersUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(
        self, user: User, *, status: Any = None, limit: int = MY_ORDERS_LIMIT
    ) -> MyOrdersResult:
        try:
            parsed = _parse_optional_status(status)
        except InvalidStatusError as exc:
            return MyOrdersResult(
                error=LedgerError(LedgerErrorCode.VALIDATION_ERROR, str(exc))
            )

        orders = self._transactions.list_for_owner(
            user_id=user.id,
            email=user.email,
            status=parsed,
            limit=max(1, min(limit, MAX_PAGE_LIMIT)),
        )
        counts = {"total": len(orders)}
        for counted in MY_ORDERS_COUNTED:
            counts[counted.value] = sum(1 for o in orders if o.status == counted)
        return MyOrdersResult(orders=orders, counts=counts)


class GetMyOrderUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, user: User, transaction_id: UUID) -> TransactionResult:
        transaction = self._transactions.get(transaction_id)
        if transaction is None:
            return TransactionResult(error=transaction_not_found())
        if not transaction.is_owned_by(user.id, user.email):
            return TransactionResult(
                error=LedgerError(
                    LedgerErrorCode.FORBIDDEN, "No tenés permiso para ver este pedido."
                )
            )
        return TransactionResult(transaction=transaction)
