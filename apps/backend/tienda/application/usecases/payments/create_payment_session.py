"""
===============================================================================
USE CASE: Create Payment Session
===============================================================================

Business Goal:
    Convertir el carrito del cliente en una sesión de pago redirect-based
    del proveedor y devolver la URL a la que redirigir.

Reglas:
    - items no vacío.
    - Cada ítem: title string no vacío, unit_price y quantity numéricos > 0.
    - Redirecciones opcionales (éxito / fallo).
    - Fallos del proveedor se propagan como PaymentGatewayError (502 en el
      borde HTTP). La transacción se crea luego, vía webhook.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    CreatePaymentSessionUseCase

Collaborators:
    - PaymentGateway: create_session(items, success_redirect, failure_redirect)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Mapping, Sequence

from ....crosscutting.logger import logger
from ....domain.entities import LineItem
from ....domain.services import PaymentGateway, PaymentSession


class PaymentErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass(frozen=True)
class PaymentError:
    code: PaymentErrorCode
    message: str


@dataclass
class PaymentSessionResult:
    session: PaymentSession | None = None
    error: PaymentError | None = None


@dataclass(frozen=True)
class CreatePaymentSessionInput:
    items: Sequence[Mapping[str, Any]] = field(default_factory=tuple)
    success_redirect: str | None = None
    failure_redirect: str | None = None


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and value > 0


class CreatePaymentSessionUseCase:
    def __init__(self, payment_gateway: PaymentGateway) -> None:
        self._gateway = payment_gateway

    def execute(self, input_data: CreatePaymentSessionInput) -> PaymentSessionResult:
        raw_items = list(input_data.items or [])
        if not raw_items:
            return self._validation_error("Se requiere al menos un ítem.")

        items: list[LineItem] = []
        for raw in raw_items:
            title = raw.get("title") if isinstance(raw, Mapping) else None
            if not isinstance(title, str) or not title.strip():
                return self._validation_error("Cada ítem debe tener un title (string).")
            if not _is_positive_number(raw.get("unit_price")):
                return self._validation_error("Cada ítem debe tener un unit_price (número).")
            if not _is_positive_number(raw.get("quantity")):
                return self._validation_error("Cada ítem debe tener un quantity (número).")
            items.append(
                LineItem.of(
                    title=title.strip(),
                    unit_price=float(raw["unit_price"]),
                    quantity=int(raw["quantity"]),
                    description=raw.get("description"),
                )
            )

        session = self._gateway.create_session(
            items,
            success_redirect=input_data.success_redirect,
            failure_redirect=input_data.failure_redirect,
        )
        logger.info(
            "Payment session created",
            extra={"payment_id": session.payment_id, "items_count": len(items)},
        )
        return PaymentSessionResult(session=session)

    @staticmethod
    def _validation_error(message: str) -> PaymentSessionResult:
        return PaymentSessionResult(
            error=PaymentError(PaymentErrorCode.VALIDATION_ERROR, message)
        )
