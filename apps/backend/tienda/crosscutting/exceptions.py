# apps/backend/tienda/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  TiendaError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo
  - Señalar colisiones de claves únicas (email, transactionId) a los casos de uso

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/repositories/* (DatabaseError, DuplicateKeyError)
  - infrastructure/services/* (PaymentGatewayError, EmailDeliveryError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class TiendaError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      TiendaError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "TIENDA_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(TiendaError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateKeyError(DatabaseError):
    """Violación de unicidad (email de usuario, transactionId, clave de setting)."""

    error_code: str = "DUPLICATE_KEY"

    def __init__(self, message: str, *, key: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.key = key


class PaymentGatewayError(TiendaError):
    """Errores del proveedor de pagos (sesión de pago no creada)."""

    error_code: str = "PAYMENT_GATEWAY_ERROR"


class EmailDeliveryError(TiendaError):
    """Errores del proveedor de email transaccional."""

    error_code: str = "EMAIL_DELIVERY_ERROR"
