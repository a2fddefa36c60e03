"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - Los use cases devuelven errores tipados (code + message [+ resource]).
  - La API traduce a RFC7807 (crosscutting.error_responses).
  - Código desconocido -> 500 genérico (nunca se filtra el detalle interno).

Colaboradores:
  - application.usecases.* (AuthErrorCode, CatalogErrorCode, ...)
  - crosscutting.error_responses (validation_error, forbidden, etc.)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from tienda.application.usecases.auth import AuthError, AuthErrorCode
from tienda.application.usecases.catalog import CatalogError, CatalogErrorCode
from tienda.application.usecases.ledger import LedgerError, LedgerErrorCode
from tienda.application.usecases.orders import OrderError, OrderErrorCode
from tienda.application.usecases.payments import PaymentError
from tienda.application.usecases.site_settings import SettingsError
from tienda.crosscutting.error_responses import (
    bad_request,
    conflict,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
    validation_error,
)


def raise_auth_error(error: AuthError, *, target_id: object | None = None) -> NoReturn:
    """
    Traduce AuthErrorCode -> HTTP.

    Nota:
      - INVALID_TOKEN (recuperación de contraseña) es 400, no 401: el
        cliente no está autenticado con ese token.
    """
    if error.code == AuthErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == AuthErrorCode.INVALID_CREDENTIALS:
        raise unauthorized(error.message)
    if error.code == AuthErrorCode.INVALID_TOKEN:
        raise bad_request(error.message)
    if error.code in (AuthErrorCode.FORBIDDEN, AuthErrorCode.SELF_MODIFICATION):
        raise forbidden(error.message)
    if error.code == AuthErrorCode.NOT_FOUND:
        raise not_found(error.resource or "User", str(target_id or "unknown"))
    if error.code == AuthErrorCode.CONFLICT:
        raise conflict(error.message)
    raise internal_error(error.message)


def raise_catalog_error(error: CatalogError, *, product_id: object | None = None) -> NoReturn:
    if error.code == CatalogErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == CatalogErrorCode.NOT_FOUND:
        raise not_found("Product", str(product_id or "unknown"))
    raise internal_error(error.message)


def raise_settings_error(error: SettingsError) -> NoReturn:
    raise validation_error(error.message)


def raise_payment_error(error: PaymentError) -> NoReturn:
    raise validation_error(error.message)


def raise_ledger_error(
    error: LedgerError, *, transaction_id: object | None = None
) -> NoReturn:
    if error.code == LedgerErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == LedgerErrorCode.NOT_FOUND:
        raise not_found("Transaction", str(transaction_id or "unknown"))
    if error.code == LedgerErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    raise internal_error(error.message)


def raise_order_error(error: OrderError, *, order_id: object | None = None) -> NoReturn:
    if error.code == OrderErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == OrderErrorCode.NOT_FOUND:
        raise not_found("Order", str(order_id or "unknown"))
    raise internal_error(error.message)
