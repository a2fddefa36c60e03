"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Módulo:
    Paquete de Schemas HTTP (DTOs Pydantic)

Responsabilidades:
    - Agrupar contratos HTTP por feature (users/products/settings/payments/
      transactions/orders).
    - Mantener separados DTOs (schemas) de controladores (routers).

Reglas:
    - Schemas NO importan infraestructura ni ejecutan casos de uso.
    - JSON en camelCase vía CamelModel.
===============================================================================
"""

__all__ = []
