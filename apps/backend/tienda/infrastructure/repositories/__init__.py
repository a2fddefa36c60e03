"""
============================================================
TARJETA CRC
============================================================
Class: tienda.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.
- Mantener una API estable para el container.

Collaborators:
- Repositorios Postgres (SQL crudo)
- Repositorios InMemory (testing / CI)
============================================================
"""

from .in_memory import (
    InMemoryOrderRepository,
    InMemoryProductRepository,
    InMemorySettingRepository,
    InMemoryTransactionRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresOrderRepository,
    PostgresProductRepository,
    PostgresSettingRepository,
    PostgresTransactionRepository,
    PostgresUserRepository,
)

__all__ = [
    # Postgres
    "PostgresUserRepository",
    "PostgresProductRepository",
    "PostgresTransactionRepository",
    "PostgresOrderRepository",
    "PostgresSettingRepository",
    # In-memory
    "InMemoryUserRepository",
    "InMemoryProductRepository",
    "InMemoryTransactionRepository",
    "InMemoryOrderRepository",
    "InMemorySettingRepository",
]
