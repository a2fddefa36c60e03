"""
===============================================================================
LEDGER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Tipos de resultado del ledger de transacciones:
      - Transición de estado, envío y notas (admin).
      - Webhook del proveedor de pagos (idempotente).
      - Consultas paginadas, estadísticas y vista "mis pedidos".

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Responsibilities:
    - LedgerErrorCode / LedgerError.
    - Un DTO de resultado por forma de respuesta.
    - WebhookOutcome: qué hizo el webhook (para logging y tests).

Collaborators:
    - domain.entities.Transaction
    - domain.repositories.StatusAggregate
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from ....domain.entities import Transaction
from ....domain.ledger import TransactionStatus
from ....domain.repositories import StatusAggregate


class LedgerErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: estado fuera del vocabulario, ítems inválidos, etc.
      - NOT_FOUND: transacción inexistente.
      - FORBIDDEN: la transacción no pertenece al usuario.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"


@dataclass(frozen=True)
class LedgerError:
    code: LedgerErrorCode
    message: str
    resource: str | None = None


@dataclass
class TransactionResult:
    transaction: Transaction | None = None
    error: LedgerError | None = None


@dataclass
class TransactionPage:
    transactions: List[Transaction] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    skip: int = 0
    error: LedgerError | None = None

    @property
    def has_more(self) -> bool:
        return self.skip + len(self.transactions) < self.total


@dataclass
class LedgerStats:
    """Read-model recalculado por request (sin mantenimiento incremental)."""

    by_status: Dict[TransactionStatus, StatusAggregate] = field(default_factory=dict)
    total: StatusAggregate = field(default_factory=StatusAggregate)
    approved: StatusAggregate = field(default_factory=StatusAggregate)
    recent: List[Transaction] = field(default_factory=list)
    error: LedgerError | None = None


@dataclass
class MyOrdersResult:
    orders: List[Transaction] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)
    error: LedgerError | None = None


class WebhookOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass
class WebhookResult:
    outcome: WebhookOutcome
    transaction: Transaction | None = None


def transaction_not_found() -> LedgerError:
    return LedgerError(
        LedgerErrorCode.NOT_FOUND, "Transacción no encontrada.", resource="Transaction"
    )
