"""
===============================================================================
TARJETA CRC — tienda/interfaces/api/http/routers/payments.py
===============================================================================

Class/Module:
    Payments Router

Responsibilities:
    - Crear sesiones de pago redirect-based (carrito -> proveedor).
    - Recibir webhooks del proveedor (firma HMAC en X-Signature).
    - Crear transacciones de prueba para usuarios autenticados.

Collaborators:
    - tienda.application.usecases.payments / ledger
    - tienda.container.get_payment_gateway (verificación de firma)

Notes:
    - El webhook responde 200 aunque falle la persistencia local: el
      proveedor reintenta ante cualquier otra respuesta.
===============================================================================
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from tienda.application.usecases.ledger import (
    CreateTestOrderInput,
    CreateTestOrderUseCase,
    RecordWebhookUseCase,
    line_items_from_payload,
)
from tienda.application.usecases.payments import (
    CreatePaymentSessionInput,
    CreatePaymentSessionUseCase,
)
from tienda.container import (
    get_create_payment_session_use_case,
    get_create_test_order_use_case,
    get_payment_gateway,
    get_record_webhook_use_case,
)
from tienda.crosscutting.error_responses import unauthorized
from tienda.crosscutting.logger import logger
from tienda.domain.services import PaymentGateway
from tienda.identity.auth_users import require_user
from tienda.identity.users import User

from ..error_mapping import raise_ledger_error, raise_payment_error
from ..schemas.payments import (
    CreatePaymentReq,
    CreatePaymentRes,
    CreateTestOrderReq,
    CreateTestOrderRes,
    WebhookAckRes,
)
from ..schemas.transactions import to_transaction_res

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/create", response_model=CreatePaymentRes)
def create_payment(
    req: CreatePaymentReq,
    use_case: CreatePaymentSessionUseCase = Depends(get_create_payment_session_use_case),
):
    result = use_case.execute(
        CreatePaymentSessionInput(
            items=req.items or [],
            success_redirect=req.success_redirect,
            failure_redirect=req.failure_redirect,
        )
    )
    if result.error is not None:
        raise_payment_error(result.error)
    return CreatePaymentRes(
        payment_url=result.session.payment_url,
        payment_id=result.session.payment_id,
    )


@router.post("/webhook", response_model=WebhookAckRes)
async def payment_webhook(
    request: Request,
    x_signature: str | None = Header(None, alias="X-Signature"),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    use_case: RecordWebhookUseCase = Depends(get_record_webhook_use_case),
):
    body = await request.body()
    if not gateway.verify_signature(body, x_signature):
        logger.warning("Webhook signature rejected")
        raise unauthorized("Firma de webhook inválida.")

    try:
        event = json.loads(body or b"{}")
    except ValueError:
        logger.warning("Webhook with malformed JSON body", extra={"bytes": len(body)})
        return WebhookAckRes()
    if not isinstance(event, dict):
        logger.warning("Webhook body is not an object")
        return WebhookAckRes()

    # R: Fallas locales quedan en logs (outcome FAILED), nunca en la respuesta.
    # R: execute bloquea (psycopg); corre fuera del event loop.
    await run_in_threadpool(use_case.execute, event)
    return WebhookAckRes()


@router.post("/create-test-order", response_model=CreateTestOrderRes, status_code=201)
def create_test_order(
    req: CreateTestOrderReq | None = None,
    use_case: CreateTestOrderUseCase = Depends(get_create_test_order_use_case),
    user: User = Depends(require_user()),
):
    items = line_items_from_payload(req.items if req is not None else None)
    result = use_case.execute(CreateTestOrderInput(user=user, items=items or None))
    if result.error is not None:
        raise_ledger_error(result.error)
    return CreateTestOrderRes(
        message="Transacción de prueba creada.",
        transaction=to_transaction_res(result.transaction),
    )
