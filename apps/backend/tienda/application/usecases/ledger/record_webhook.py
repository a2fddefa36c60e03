"""
===============================================================================
USE CASE: Record Payment Webhook
===============================================================================

Business Goal:
    Registrar en el ledger cada notificación del proveedor de pagos.

Reglas:
    - Idempotente por id externo: se busca por transactionId o paymentId.
        * Existe -> transición de estado SOLO si el estado reportado difiere
          (reentrega idéntica = no-op).
        * No existe -> alta con historial sembrado con el estado reportado.
    - Entregas concurrentes del mismo evento: la unicidad de transactionId
      en el storage gana; el perdedor recibe DuplicateKeyError y cae al
      camino de transición.
    - Estado fuera del vocabulario -> se loguea y se ignora.
    - amount = suma de subtotales de los ítems reportados.
    - Fallos de persistencia se loguean y se reportan como FAILED; el borde
      HTTP igualmente responde 200 al proveedor.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    RecordWebhookUseCase

Collaborators:
    - TransactionRepository: find_by_external_id, create, append_status
    - domain.ledger: parse_status, StatusLedger
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import uuid4

from ....crosscutting.exceptions import DatabaseError, DuplicateKeyError
from ....crosscutting.logger import logger
from ....domain.entities import CustomerInfo, LineItem, Transaction, total_of
from ....domain.ledger import (
    InvalidStatusError,
    StatusLedger,
    TransactionStatus,
    parse_status,
    utcnow,
)
from ....domain.repositories import TransactionRepository
from .ledger_results import WebhookOutcome, WebhookResult

CREATED_NOTE = "Transacción creada desde webhook"
UPDATED_NOTE = "Estado actualizado automáticamente por webhook"


def parse_line_items(raw_items: Any) -> list[LineItem]:
    """Ítems reportados por el proveedor; los malformados se descartan."""
    items: list[LineItem] = []
    for raw in raw_items or []:
        try:
            items.append(
                LineItem.of(
                    title=str(raw["title"]),
                    unit_price=float(raw["unit_price"]),
                    quantity=int(raw["quantity"]),
                    description=raw.get("description"),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Webhook item discarded", extra={"item": str(raw)[:200]})
    return items


def customer_from_event(event: Mapping[str, Any]) -> CustomerInfo:
    payer = event.get("payer") or {}
    if not isinstance(payer, Mapping):
        payer = {}
    phone = payer.get("phone")
    if isinstance(phone, Mapping):
        phone = phone.get("number")
    email = payer.get("email") or event.get("email")
    return CustomerInfo(
        email=str(email).strip().lower() if email else None,
        name=payer.get("name") or payer.get("first_name"),
        phone=str(phone) if phone else None,
    )


class RecordWebhookUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, event: Mapping[str, Any]) -> WebhookResult:
        payment_id = event.get("payment_id")
        if not payment_id:
            logger.warning("Webhook without payment_id ignored", extra={"event": event.get("event")})
            return WebhookResult(outcome=WebhookOutcome.IGNORED)
        payment_id = str(payment_id)

        try:
            status = parse_status(TransactionStatus, event.get("status"))
        except InvalidStatusError:
            logger.warning(
                "Webhook with unknown status ignored",
                extra={"payment_id": payment_id, "status": str(event.get("status"))},
            )
            return WebhookResult(outcome=WebhookOutcome.IGNORED)

        logger.info(
            "Payment webhook received",
            extra={"payment_id": payment_id, "status": status.value, "event": event.get("event")},
        )

        try:
            existing = self._transactions.find_by_external_id(payment_id)
            if existing is not None:
                return self._transition(existing, status)
            return self._create(payment_id, status, event)
        except DatabaseError as exc:
            logger.error(
                "Webhook persistence failed",
                extra={"payment_id": payment_id, "error_id": exc.error_id},
            )
            return WebhookResult(outcome=WebhookOutcome.FAILED)

    def _create(
        self, payment_id: str, status: TransactionStatus, event: Mapping[str, Any]
    ) -> WebhookResult:
        items = parse_line_items(event.get("items"))
        transaction = Transaction(
            id=uuid4(),
            transaction_id=payment_id,
            payment_id=payment_id,
            items=items,
            amount=total_of(items),
            ledger=StatusLedger.opened_with(TransactionStatus, status, note=CREATED_NOTE),
            customer=customer_from_event(event),
            payment_method=event.get("payment_method_id"),
            payment_type=event.get("payment_type_id"),
            webhook_data=dict(event),
        )
        try:
            created = self._transactions.create(transaction)
        except DuplicateKeyError:
            # Entrega concurrente: otra request insertó primero.
            existing = self._transactions.find_by_external_id(payment_id)
            if existing is None:
                raise
            return self._transition(existing, status)

        logger.info(
            "Transaction created from webhook",
            extra={"transaction_id": payment_id, "status": status.value},
        )
        return WebhookResult(outcome=WebhookOutcome.CREATED, transaction=created)

    def _transition(self, existing: Transaction, status: TransactionStatus) -> WebhookResult:
        if existing.status == status:
            return WebhookResult(outcome=WebhookOutcome.UNCHANGED, transaction=existing)

        change = existing.ledger.change_for(status, changed_by=None, note=UPDATED_NOTE)
        updated = self._transactions.append_status(
            existing.id, change, only_if_changed=True
        )
        if updated is None:
            return WebhookResult(outcome=WebhookOutcome.IGNORED)
        # only_if_changed: si otra entrega ya aplicó el mismo estado, no hay entrada nueva.
        outcome = (
            WebhookOutcome.UPDATED
            if len(updated.ledger) > len(existing.ledger)
            else WebhookOutcome.UNCHANGED
        )
        logger.info(
            "Transaction status updated from webhook",
            extra={"transaction_id": existing.transaction_id, "status": status.value},
        )
        return WebhookResult(outcome=outcome, transaction=updated)
