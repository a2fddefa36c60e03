"""
PostgreSQL Repository Implementations.

SQL parametrizado sobre psycopg 3; historiales y snapshots en JSONB.
"""

from .order import PostgresOrderRepository
from .product import PostgresProductRepository
from .setting import PostgresSettingRepository
from .transaction import PostgresTransactionRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresProductRepository",
    "PostgresTransactionRepository",
    "PostgresOrderRepository",
    "PostgresSettingRepository",
]
