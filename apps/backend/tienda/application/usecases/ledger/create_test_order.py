"""
===============================================================================
USE CASE: Create Test Order
===============================================================================

Business Goal:
    Generar una transacción aprobada sin dinero real para probar el flujo
    de "mis pedidos" y el panel de ventas.

Reglas:
    - Estado forzado a `approved`, nota que la marca como transacción de prueba.
    - Sin ítems -> fixture de dos líneas (100 x 2 y 50 x 1).
    - amount se recalcula SIEMPRE como suma de subtotales.
    - transactionId TEST_<epoch-ms>_<random>, paymentId TEST_PAYMENT_<epoch-ms>.
===============================================================================
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Any, Sequence
from uuid import uuid4

from ....crosscutting.exceptions import DuplicateKeyError
from ....domain.entities import CustomerInfo, LineItem, Transaction, total_of
from ....domain.ledger import StatusLedger, TransactionStatus
from ....domain.repositories import TransactionRepository
from ....identity.users import User
from .ledger_results import LedgerError, LedgerErrorCode, TransactionResult

TEST_ORDER_NOTE = "TRANSACCIÓN DE PRUEBA - No involucra dinero real"
TEST_HISTORY_NOTE = "Transacción de prueba creada automáticamente"
FALLBACK_EMAIL = "test@example.com"
FALLBACK_NAME = "Usuario de Prueba"


def default_test_items() -> list[LineItem]:
    return [
        LineItem.of("Producto de Prueba 1", 100, 2, "Este es un producto de prueba"),
        LineItem.of("Producto de Prueba 2", 50, 1, "Otro producto de prueba"),
    ]


def _test_ids() -> tuple[str, str]:
    millis = int(time.time() * 1000)
    return f"TEST_{millis}_{secrets.token_hex(5)[:9]}", f"TEST_PAYMENT_{millis}"


@dataclass(frozen=True)
class CreateTestOrderInput:
    user: User
    items: Sequence[LineItem] | None = None


class CreateTestOrderUseCase:
    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transactions = transaction_repository

    def execute(self, input_data: CreateTestOrderInput) -> TransactionResult:
        items = list(input_data.items or []) or default_test_items()
        if any(item.quantity <= 0 or item.unit_price < 0 for item in items):
            return TransactionResult(
                error=LedgerError(
                    LedgerErrorCode.VALIDATION_ERROR,
                    "Cada ítem debe tener precio >= 0 y cantidad positiva.",
                )
            )

        user = input_data.user
        transaction_id, payment_id = _test_ids()
        transaction = Transaction(
            id=uuid4(),
            transaction_id=transaction_id,
            payment_id=payment_id,
            user_id=user.id,
            customer=CustomerInfo(
                email=user.email or FALLBACK_EMAIL,
                name=user.name or FALLBACK_NAME,
                phone=user.phone,
            ),
            items=items,
            amount=total_of(items),
            ledger=StatusLedger.opened_with(
                TransactionStatus,
                TransactionStatus.APPROVED,
                changed_by=user.id,
                note=TEST_HISTORY_NOTE,
            ),
            payment_method="test",
            payment_type="test_mode",
            notes=TEST_ORDER_NOTE,
        )
        try:
            created = self._transactions.create(transaction)
        except DuplicateKeyError:
            # Colisión de id aleatorio: un reintento con ids nuevos.
            transaction.transaction_id, transaction.payment_id = _test_ids()
            created = self._transactions.create(transaction)
        return TransactionResult(transaction=created)


def line_items_from_payload(raw_items: Sequence[Any] | None) -> list[LineItem]:
    """Convierte ítems validados por el borde HTTP (title/unit_price/quantity)."""
    return [
        LineItem.of(
            title=item.title,
            unit_price=item.unit_price,
            quantity=item.quantity,
            description=getattr(item, "description", None),
        )
        for item in raw_items or []
    ]
