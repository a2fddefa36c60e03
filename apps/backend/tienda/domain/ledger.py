"""
===============================================================================
TARJETA CRC — domain/ledger.py
===============================================================================

Módulo:
    Ledger genérico de estados (append-only) + vocabularios de estado

Responsabilidades:
    - Definir los vocabularios de estado: pago (TransactionStatus),
      envío (ShippingStatus) y preparación de pedidos (OrderStatus).
    - Representar un cambio de estado (StatusChange) con fecha, actor y nota.
    - Mantener el historial append-only y el estado actual coherentes
      (StatusLedger): el estado actual ES el último cambio registrado.
    - Parsear estados externos de forma estricta (InvalidStatusError).
    - Serializar/deserializar cambios para JSONB y respuestas HTTP.

Colaboradores:
    - domain.entities.Transaction / Order: guardan su historial con este tipo.
    - application.usecases.ledger / orders: registran transiciones.
    - infrastructure.repositories.*: persisten el historial como JSON.

Notas:
    - No existe tabla de transiciones: cualquier estado puede seguir a cualquier
      otro (el vocabulario viene del proveedor de pagos).
    - El historial nunca se trunca ni se reordena.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Iterable, TypeVar
from uuid import UUID


class TransactionStatus(str, Enum):
    """Estados de pago (vocabulario del proveedor)."""

    PENDING = "pending"
    IN_PROCESS = "in_process"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class ShippingStatus(str, Enum):
    """Estados de envío (eje independiente del pago)."""

    PENDING = "pending"
    PREPARING = "preparing"
    DISPATCHED = "dispatched"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


class OrderStatus(str, Enum):
    """Estados de preparación de pedidos (vista interna de fulfillment)."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


S = TypeVar("S", bound=Enum)


class InvalidStatusError(ValueError):
    """El valor recibido no pertenece al vocabulario de estados."""

    def __init__(self, value: Any, status_type: type[Enum]):
        self.value = value
        self.allowed = [s.value for s in status_type]
        super().__init__(
            f"Estado inválido '{value}'. Valores permitidos: {', '.join(self.allowed)}"
        )


def parse_status(status_type: type[S], value: Any) -> S:
    """Convierte un valor externo al enum; falla con InvalidStatusError."""
    if isinstance(value, status_type):
        return value
    try:
        return status_type(str(value).strip())
    except ValueError as exc:
        raise InvalidStatusError(value, status_type) from exc


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Fechas sin offset (p.ej. `?startDate=2024-01-01`) se interpretan en UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class StatusChange(Generic[S]):
    """Entrada del historial. changed_by=None indica un cambio del sistema."""

    status: S
    changed_at: datetime
    changed_by: UUID | None = None
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "changedAt": self.changed_at.isoformat(),
            "changedBy": str(self.changed_by) if self.changed_by else None,
            "note": self.note,
        }


def status_change_from_dict(status_type: type[S], data: dict[str, Any]) -> StatusChange[S]:
    changed_at = data.get("changedAt")
    changed_by = data.get("changedBy")
    return StatusChange(
        status=parse_status(status_type, data.get("status")),
        changed_at=(
            datetime.fromisoformat(changed_at)
            if isinstance(changed_at, str)
            else (changed_at or utcnow())
        ),
        changed_by=UUID(str(changed_by)) if changed_by else None,
        note=data.get("note"),
    )


class StatusLedger(Generic[S]):
    """
    Historial append-only parametrizado por el enum de estados.

    Invariantes:
      - current == entries[-1].status (si hay entradas)
      - len(entries) nunca decrece
    """

    __slots__ = ("_status_type", "_entries")

    def __init__(
        self, status_type: type[S], entries: Iterable[StatusChange[S]] = ()
    ) -> None:
        self._status_type = status_type
        self._entries: list[StatusChange[S]] = list(entries)

    @classmethod
    def opened_with(
        cls,
        status_type: type[S],
        status: S | str,
        *,
        changed_by: UUID | None = None,
        note: str | None = None,
        at: datetime | None = None,
    ) -> "StatusLedger[S]":
        ledger = cls(status_type)
        ledger.record(status, changed_by=changed_by, note=note, at=at)
        return ledger

    @property
    def status_type(self) -> type[S]:
        return self._status_type

    @property
    def current(self) -> S | None:
        return self._entries[-1].status if self._entries else None

    @property
    def entries(self) -> tuple[StatusChange[S], ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def change_for(
        self,
        status: S | str,
        *,
        changed_by: UUID | None = None,
        note: str | None = None,
        at: datetime | None = None,
    ) -> StatusChange[S]:
        """Construye (sin registrar) la entrada para una transición."""
        return StatusChange(
            status=parse_status(self._status_type, status),
            changed_at=at or utcnow(),
            changed_by=changed_by,
            note=note,
        )

    def record(
        self,
        status: S | str,
        *,
        changed_by: UUID | None = None,
        note: str | None = None,
        at: datetime | None = None,
    ) -> StatusChange[S]:
        change = self.change_for(status, changed_by=changed_by, note=note, at=at)
        self._entries.append(change)
        return change

    def to_list(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(
        cls, status_type: type[S], data: Iterable[dict[str, Any]] | None
    ) -> "StatusLedger[S]":
        return cls(
            status_type,
            (status_change_from_dict(status_type, item) for item in (data or [])),
        )
