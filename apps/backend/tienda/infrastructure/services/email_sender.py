"""
============================================================
TARJETA CRC — infrastructure/services/email_sender.py
============================================================
Classes: HttpEmailSender, LoggingEmailSender

Responsibilities:
  - Enviar emails transaccionales vía API HTTP del proveedor (Brevo).
  - Reintentar fallas transitorias; traducir la falla final a EmailDeliveryError.
  - En dev/test: registrar el email en logs en lugar de enviarlo.

Collaborators:
  - httpx
  - infrastructure.services.retry
  - crosscutting.exceptions.EmailDeliveryError
============================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ...crosscutting.exceptions import EmailDeliveryError
from ...crosscutting.logger import logger
from .retry import create_retry_decorator


class HttpEmailSender:
    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        sender_name: str,
        sender_address: str,
        timeout_seconds: float = 10.0,
    ):
        self._api_url = api_url
        self._api_key = api_key
        self._sender = {"name": sender_name, "email": sender_address}
        self._timeout = timeout_seconds
        self._post = create_retry_decorator()(self._post_once)

    def _post_once(self, payload: dict[str, Any]) -> None:
        response = httpx.post(
            self._api_url,
            json=payload,
            headers={"api-key": self._api_key, "accept": "application/json"},
            timeout=self._timeout,
        )
        response.raise_for_status()

    def send(self, *, to: str, subject: str, html: str) -> None:
        payload = {
            "sender": self._sender,
            "to": [{"email": to}],
            "subject": subject,
            "htmlContent": html,
        }
        try:
            self._post(payload)
        except httpx.HTTPError as exc:
            logger.error(
                "Email delivery failed",
                extra={"error_type": type(exc).__name__, "subject": subject},
            )
            raise EmailDeliveryError(
                "No se pudo enviar el email", original_error=exc
            ) from exc
        logger.info("Email enviado", extra={"subject": subject})


@dataclass(frozen=True, slots=True)
class SentEmail:
    to: str
    subject: str
    html: str


class LoggingEmailSender:
    """Sender de desarrollo: no envía, deja rastro en logs (y en memoria para tests)."""

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []

    def send(self, *, to: str, subject: str, html: str) -> None:
        self.sent.append(SentEmail(to=to, subject=subject, html=html))
        logger.info("Email (modo log) no enviado", extra={"subject": subject})
