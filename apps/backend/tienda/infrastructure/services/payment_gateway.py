"""
============================================================
TARJETA CRC — infrastructure/services/payment_gateway.py
============================================================
Classes: HttpPaymentGateway, FakePaymentGateway, verify_hmac_signature

Responsibilities:
  - Crear sesiones de pago redirect-based en el proveedor (checkout MercadoPago).
  - Validar la firma HMAC-SHA256 de los webhooks entrantes.
  - Reintentar SOLO fallas transitorias (tenacity vía create_retry_decorator).
  - Traducir fallas finales a PaymentGatewayError (sin filtrar secretos).

Collaborators:
  - httpx (HTTP client)
  - infrastructure.services.retry
  - domain.services.PaymentGateway / PaymentSession
  - crosscutting.exceptions.PaymentGatewayError

Wire contract (proveedor):
  POST {payment_api_url}/pay/mercadopago
    headers: x-project-id, Authorization: Bearer <secret>
    body:    {"items": [...], "options": {"successRedirect", "failureRedirect"}}
    resp:    {"payment_url": str, "payment_id": str}
============================================================
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Any, Sequence
from uuid import uuid4

import httpx

from ...crosscutting.exceptions import PaymentGatewayError
from ...crosscutting.logger import logger
from ...domain.entities import LineItem
from ...domain.services import PaymentSession
from .retry import create_retry_decorator

_CHECKOUT_PATH = "/pay/mercadopago"


def verify_hmac_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """HMAC-SHA256 hex del body crudo; comparación en tiempo constante."""
    if not secret or not signature:
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    provided = signature.strip()
    if provided.lower().startswith("sha256="):
        provided = provided[len("sha256="):]
    return hmac.compare_digest(expected, provided.lower())


def _session_payload(
    items: Sequence[LineItem],
    success_redirect: str | None,
    failure_redirect: str | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "items": [
            {
                key: value
                for key, value in (
                    ("title", i.title),
                    ("unit_price", i.unit_price),
                    ("quantity", i.quantity),
                    ("description", i.description),
                )
                if value is not None
            }
            for i in items
        ]
    }
    options = {
        key: value
        for key, value in (
            ("successRedirect", success_redirect),
            ("failureRedirect", failure_redirect),
        )
        if value
    }
    if options:
        payload["options"] = options
    return payload


class HttpPaymentGateway:
    """Adaptador HTTP del proveedor de pagos."""

    def __init__(
        self,
        *,
        api_url: str,
        project_id: str,
        secret_key: str,
        webhook_secret: str,
        timeout_seconds: float = 15.0,
        require_signature: bool = True,
    ):
        if not api_url:
            raise ValueError("api_url is required for HttpPaymentGateway")
        self._api_url = api_url.rstrip("/")
        self._project_id = project_id
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._timeout = timeout_seconds
        self._require_signature = require_signature
        self._post = create_retry_decorator()(self._post_once)

    def _post_once(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = httpx.post(
            url,
            json=payload,
            headers={
                "Authorization": f"Bearer {self._secret_key}",
                "x-project-id": self._project_id,
            },
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    def create_session(
        self,
        items: Sequence[LineItem],
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
    ) -> PaymentSession:
        payload = _session_payload(items, success_redirect, failure_redirect)
        try:
            data = self._post(f"{self._api_url}{_CHECKOUT_PATH}", payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(
                "Payment session creation failed",
                extra={"error_type": type(exc).__name__, "items": len(items)},
            )
            raise PaymentGatewayError(
                "No se pudo crear el pago", original_error=exc
            ) from exc

        payment_url = data.get("payment_url")
        payment_id = data.get("payment_id")
        if not payment_url or not payment_id:
            raise PaymentGatewayError("Respuesta del proveedor sin payment_url/payment_id")

        logger.info("Payment session created", extra={"payment_id": payment_id})
        return PaymentSession(payment_id=str(payment_id), payment_url=str(payment_url))

    def verify_signature(self, body: bytes, signature: str | None) -> bool:
        if not self._webhook_secret:
            return not self._require_signature
        return verify_hmac_signature(self._webhook_secret, body, signature)


class FakePaymentGateway:
    """Gateway determinístico para dev/tests (no hace llamadas de red)."""

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:3000/pages/checkout-fake.html",
        webhook_secret: str = "",
    ):
        self._base_url = base_url
        self._webhook_secret = webhook_secret
        self.sessions: list[PaymentSession] = []

    def create_session(
        self,
        items: Sequence[LineItem],
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
    ) -> PaymentSession:
        payment_id = f"FAKE_{uuid4().hex[:12]}"
        session = PaymentSession(
            payment_id=payment_id,
            payment_url=f"{self._base_url}?payment_id={payment_id}",
        )
        self.sessions.append(session)
        return session

    def verify_signature(self, body: bytes, signature: str | None) -> bool:
        if not self._webhook_secret:
            return True
        return verify_hmac_signature(self._webhook_secret, body, signature)
