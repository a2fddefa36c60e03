"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz de la tienda (catálogo, settings, pagos,
    ledger y pedidos).
  - Centralizar responses RFC7807 para OpenAPI.

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)

Notas:
  - Se incluye desde tienda/api/main.py con prefix="/api", junto a los
    routers de auth y admin.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import (
    orders_router,
    payments_router,
    products_router,
    settings_router,
    transactions_router,
)


def build_router() -> APIRouter:
    """Construye el router de features (sin side-effects al importar sub-módulos)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    # Público primero, back-office al final.
    api_router.include_router(products_router)
    api_router.include_router(settings_router)
    api_router.include_router(payments_router)
    api_router.include_router(transactions_router)
    api_router.include_router(orders_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
