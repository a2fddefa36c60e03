"""
===============================================================================
TARJETA CRC — tienda/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers segmentados por feature para el router raíz.

Collaborators:
    - routers.products
    - routers.settings
    - routers.payments
    - routers.transactions
    - routers.orders

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .orders import router as orders_router
from .payments import router as payments_router
from .products import router as products_router
from .settings import router as settings_router
from .transactions import router as transactions_router

__all__ = [
    "orders_router",
    "payments_router",
    "products_router",
    "settings_router",
    "transactions_router",
]
