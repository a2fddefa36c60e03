"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/transaction.py
============================================================
Class: InMemoryTransactionRepository

Responsibilities:
  - Ledger de transacciones en memoria (tests / CI).
  - Replicar las garantías del esquema Postgres:
      * transaction_id único -> DuplicateKeyError
      * append_status atómico (bajo Lock)
      * only_if_changed equivalente a `AND status <> nuevo`
  - Filtros, paginación, agregados y vista de dueño iguales a Postgres.

Collaborators:
  - domain.entities.Transaction / ShippingChange
  - domain.repositories.TransactionFilters / StatusAggregate

Constraints:
  - Thread-safe: TODA lectura/escritura bajo Lock.
  - Nunca se expone la instancia almacenada (copias al entrar y al salir).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateKeyError
from ....domain.entities import ShippingChange, Transaction
from ....domain.ledger import StatusChange, StatusLedger, TransactionStatus, utcnow
from ....domain.repositories import StatusAggregate, TransactionFilters


def _clone(tx: Transaction) -> Transaction:
    """R: Copia sin aliasing de listas ni del ledger."""
    return replace(
        tx,
        items=list(tx.items),
        ledger=StatusLedger(tx.ledger.status_type, tx.ledger.entries),
        webhook_data=dict(tx.webhook_data) if tx.webhook_data is not None else None,
        shipping_history=list(tx.shipping_history),
    )


def _in_range(tx: Transaction, start: datetime | None, end: datetime | None) -> bool:
    if tx.created_at is None:
        return start is None and end is None
    if start is not None and tx.created_at < start:
        return False
    if end is not None and tx.created_at > end:
        return False
    return True


def _matches_search(tx: Transaction, search: str | None) -> bool:
    if not search or not search.strip():
        return True
    needle = search.strip().lower()
    candidates = (tx.transaction_id, tx.customer.email or "", tx.customer.name or "")
    return any(needle in value.lower() for value in candidates)


class InMemoryTransactionRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._transactions: Dict[UUID, Transaction] = {}

    @staticmethod
    def _sorted(items: Iterable[Transaction]) -> List[Transaction]:
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(items, key=lambda t: t.created_at or oldest, reverse=True)

    def _snapshot(self) -> list[Transaction]:
        with self._lock:
            return [_clone(t) for t in self._transactions.values()]

    def create(self, transaction: Transaction) -> Transaction:
        now = utcnow()
        stored = _clone(transaction)
        stored.created_at = stored.created_at or now
        stored.updated_at = stored.updated_at or now
        with self._lock:
            if any(
                t.transaction_id == stored.transaction_id
                for t in self._transactions.values()
            ):
                raise DuplicateKeyError(
                    "InMemoryTransactionRepository: duplicate transaction_id",
                    key="uq_transactions_transaction_id",
                )
            self._transactions[stored.id] = stored
            return _clone(stored)

    def get(self, transaction_id: UUID) -> Optional[Transaction]:
        with self._lock:
            tx = self._transactions.get(transaction_id)
            return _clone(tx) if tx else None

    def find_by_external_id(self, external_id: str) -> Optional[Transaction]:
        with self._lock:
            matches = [
                t
                for t in self._transactions.values()
                if t.transaction_id == external_id or t.payment_id == external_id
            ]
            if not matches:
                return None
            oldest = datetime.min.replace(tzinfo=timezone.utc)
            return _clone(min(matches, key=lambda t: t.created_at or oldest))

    def append_status(
        self,
        transaction_id: UUID,
        change: StatusChange[TransactionStatus],
        *,
        only_if_changed: bool = False,
    ) -> Optional[Transaction]:
        with self._lock:
            tx = self._transactions.get(transaction_id)
            if tx is None:
                return None
            if not (only_if_changed and tx.status == change.status):
                tx.apply_status(change)
            return _clone(tx)

    def update_shipping(
        self, transaction_id: UUID, change: ShippingChange
    ) -> Optional[Transaction]:
        with self._lock:
            tx = self._transactions.get(transaction_id)
            if tx is None:
                return None
            tx.apply_shipping(change)
            return _clone(tx)

    def update_notes(self, transaction_id: UUID, notes: str | None) -> Optional[Transaction]:
        with self._lock:
            tx = self._transactions.get(transaction_id)
            if tx is None:
                return None
            tx.notes = notes
            tx.updated_at = utcnow()
            return _clone(tx)

    def query(
        self,
        filters: TransactionFilters,
        *,
        limit: int,
        skip: int,
    ) -> tuple[list[Transaction], int]:
        matching = self._sorted(
            t
            for t in self._snapshot()
            if (filters.status is None or t.status == filters.status)
            and _in_range(t, filters.start, filters.end)
            and _matches_search(t, filters.search)
        )
        return matching[skip : skip + limit], len(matching)

    def aggregate_by_status(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[TransactionStatus, StatusAggregate]:
        result: dict[TransactionStatus, StatusAggregate] = {}
        for tx in self._snapshot():
            if not _in_range(tx, start, end):
                continue
            current = result.get(tx.status, StatusAggregate())
            result[tx.status] = StatusAggregate(
                count=current.count + 1, amount=current.amount + tx.amount
            )
        return result

    def recent(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 5,
    ) -> list[Transaction]:
        return self._sorted(
            t for t in self._snapshot() if _in_range(t, start, end)
        )[:limit]

    def list_for_owner(
        self,
        *,
        user_id: UUID,
        email: str | None,
        status: TransactionStatus | None = None,
        limit: int = 50,
    ) -> list[Transaction]:
        return self._sorted(
            t
            for t in self._snapshot()
            if t.is_owned_by(user_id, email)
            and (status is None or t.status == status)
        )[:limit]
