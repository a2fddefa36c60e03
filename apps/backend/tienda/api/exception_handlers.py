"""
===============================================================================
TARJETA CRC — tienda/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a respuestas HTTP RFC7807.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, app_exception_handler y
    factories (database_error, service_unavailable, payment_gateway_error)
  - crosscutting.exceptions: TiendaError y derivadas (Database/PaymentGateway/Email)
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    database_error,
    internal_error,
    payment_gateway_error,
    service_unavailable,
)
from ..crosscutting.exceptions import (
    DatabaseError,
    EmailDeliveryError,
    PaymentGatewayError,
    TiendaError,
)
from ..crosscutting.logger import logger
from ..infrastructure.db.errors import DatabasePoolError


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: TiendaError,
    app_exc: AppHTTPException,
) -> JSONResponse:
    """
    Helper común para errores tipados de servicios.

    El mensaje interno (exc.message) queda en logs; la respuesta lleva el
    detail genérico de la factory y el error_id para correlacionar.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        extra={
            "code": app_exc.code.value,
            "error_id": exc.error_id,
            "error": exc.message,
            "request_id": request_id,
        },
    )

    app_exc.errors = [{"error_id": exc.error_id, "request_id": request_id}]
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    # R: Sin pool (init_pool falló o no corrió) no es una query fallida.
    if isinstance(exc.original_error, DatabasePoolError):
        app_exc = service_unavailable("base de datos")
    else:
        app_exc = database_error()
    return await _handle_service_error(request, exc=exc, app_exc=app_exc)


async def payment_gateway_error_handler(
    request: Request, exc: PaymentGatewayError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, app_exc=payment_gateway_error()
    )


async def email_delivery_error_handler(
    request: Request, exc: EmailDeliveryError
) -> JSONResponse:
    return await _handle_service_error(
        request,
        exc=exc,
        app_exc=internal_error("No se pudo enviar el email. Intentá más tarde."),
    )


async def tienda_error_handler(request: Request, exc: TiendaError) -> JSONResponse:
    # R: Errores base: tratamos como INTERNAL_ERROR por defecto.
    return await _handle_service_error(request, exc=exc, app_exc=internal_error())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de schema (body/query/path) -> 422 RFC7807 con errors[]."""
    errors = [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    app_exc = AppHTTPException(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Datos de entrada inválidos.",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica (evita filtrar internos).
    """
    request_id = _request_id_from(request)
    settings = get_settings()

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    # R: En desarrollo ayudamos un poco más; en producción evitamos filtrar detalles.
    detail = str(exc) if not settings.is_production() else "Error interno."

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
        errors=[{"request_id": request_id}],
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException debe registrarse para respetar RFC7807.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(PaymentGatewayError, payment_gateway_error_handler)
    app.add_exception_handler(EmailDeliveryError, email_delivery_error_handler)
    app.add_exception_handler(TiendaError, tienda_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
