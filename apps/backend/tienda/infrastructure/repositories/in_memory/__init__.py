"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .order import InMemoryOrderRepository
from .product import InMemoryProductRepository
from .setting import InMemorySettingRepository
from .transaction import InMemoryTransactionRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryUserRepository",
    "InMemoryProductRepository",
    "InMemoryTransactionRepository",
    "InMemoryOrderRepository",
    "InMemorySettingRepository",
]
