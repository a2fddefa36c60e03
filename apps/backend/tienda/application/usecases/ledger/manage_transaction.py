"""
===============================================================================
USE CASES: Admin transaction management (status / shipping / notes / get)
===============================================================================

Business Goal:
    Operaciones de back-office sobre una transacción existente.

Reglas:
    - TransitionStatus es el ÚNICO camino para cambiar `status`: agrega la
      entrada al historial y fija el estado en una sola escritura atómica.
    - Sin tabla de transiciones: cualquier estado puede seguir a cualquier otro.
    - Shipping es un eje independiente del pago (sin invariantes cruzados);
      cada cambio queda en su propio log.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Collaborators:
    - TransactionRepository: get, append_status, update_shipping, update_notes
    - domain.ledger: parse_status (InvalidStatusError)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from ....domain.entities import ShippingChange
from ....domain.ledger import (
    InvalidStatusError,
    ShippingStatus,
    parse_status,
    utcnow,
)
from ....domain.repositories import TransactionRepository
from .ledger_results import (
    LedgerError,
    LedgerErrorCode,
    TransactionResult,
    transaction_not_found,
)


def _invalid_status(exc: InvalidStatusError) -> TransactionResult:
    return TransactionResult(error=LedgerError(LedgerErrorCode.VALIDATION_ERROR, str(exc)))


@dataclass(frozen=True)
class TransitionStatusInput:
    transaction_id: UUID
    status: Any
    actor_id: UUID | None
    note: str | None = None


class TransitionStatusUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, input_data: TransitionStatusInput) -> TransactionResult:
        existing = self._transactions.get(input_data.transaction_id)
        if existing is None:
            return TransactionResult(error=transaction_not_found())

        try:
            change = existing.ledger.change_for(
                input_data.status,
                changed_by=input_data.actor_id,
                note=(input_data.note or "").strip() or None,
            )
        except InvalidStatusError as exc:
            return _invalid_status(exc)

        updated = self._transactions.append_status(existing.id, change)
        if updated is None:
            return TransactionResult(error=transaction_not_found())
        return TransactionResult(transaction=updated)


@dataclass(frozen=True)
class UpdateShippingInput:
    transaction_id: UUID
    actor_id: UUID | None
    shipping_status: Any = None
    tracking_number: str | None = None
    note: str | None = None


class UpdateShippingUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, input_data: UpdateShippingInput) -> TransactionResult:
        shipping_status = None
        if input_data.shipping_status:
            try:
                shipping_status = parse_status(ShippingStatus, input_data.shipping_status)
            except InvalidStatusError as exc:
                return _invalid_status(exc)

        change = ShippingChange(
            changed_at=utcnow(),
            shipping_status=shipping_status,
            tracking_number=(input_data.tracking_number or "").strip() or None,
            changed_by=input_data.actor_id,
            note=(input_data.note or "").strip() or None,
        )
        updated = self._transactions.update_shipping(input_data.transaction_id, change)
        if updated is None:
            return TransactionResult(error=transaction_not_found())
        return TransactionResult(transaction=updated)


class UpdateNotesUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, transaction_id: UUID, notes: str | None) -> TransactionResult:
        updated = self._transactions.update_notes(transaction_id, notes)
        if updated is None:
            return TransactionResult(error=transaction_not_found())
        return TransactionResult(transaction=updated)


class GetTransactionUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, transaction_id: UUID) -> TransactionResult:
        transaction = self._transactions.get(transaction_id)
        if transaction is None:
            return TransactionResult(error=transaction_not_found())
        return TransactionResult(transaction=transaction)
