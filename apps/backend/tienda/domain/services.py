"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir contratos para el proveedor de pagos y el proveedor de email.
    - Proteger a application de detalles del proveedor (URLs, auth, wire format).

Colaboradores:
    - infrastructure/services/payment_gateway.py: HTTP + fake.
    - infrastructure/services/email_sender.py: HTTP + logging.
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Fallos del proveedor -> PaymentGatewayError / EmailDeliveryError.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from .entities import LineItem


@dataclass(frozen=True, slots=True)
class PaymentSession:
    """Sesión de pago redirect-based creada en el proveedor."""

    payment_id: str
    payment_url: str


class PaymentGateway(Protocol):
    """Contrato para crear sesiones de pago y validar webhooks."""

    def create_session(
        self,
        items: Sequence[LineItem],
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
    ) -> PaymentSession: ...

    def verify_signature(self, body: bytes, signature: str | None) -> bool:
        """True si el webhook está firmado por el proveedor."""
        ...


class EmailSender(Protocol):
    """Contrato para envío de emails transaccionales."""

    def send(self, *, to: str, subject: str, html: str) -> None: ...
