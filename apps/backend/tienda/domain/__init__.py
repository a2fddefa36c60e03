"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Colaboradores:
    - domain.entities: Product, Transaction, Order, SettingRecord
    - domain.ledger: StatusLedger y vocabularios de estado
    - domain.repositories: Puertos de persistencia
    - domain.services: Puertos de servicios externos

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    Brand,
    Category,
    CustomerInfo,
    LineItem,
    Order,
    OrderItem,
    Product,
    SettingRecord,
    ShippingChange,
    Transaction,
)
from .ledger import (
    InvalidStatusError,
    OrderStatus,
    ShippingStatus,
    StatusChange,
    StatusLedger,
    TransactionStatus,
)
from .repositories import (
    OrderRepository,
    ProductRepository,
    SettingRepository,
    TransactionRepository,
    UserRepository,
)
from .services import EmailSender, PaymentGateway, PaymentSession

__all__ = [
    # Entities
    "Brand",
    "Category",
    "CustomerInfo",
    "LineItem",
    "Order",
    "OrderItem",
    "Product",
    "SettingRecord",
    "ShippingChange",
    "Transaction",
    # Ledger
    "InvalidStatusError",
    "OrderStatus",
    "ShippingStatus",
    "StatusChange",
    "StatusLedger",
    "TransactionStatus",
    # Repository Interfaces (Ports)
    "UserRepository",
    "ProductRepository",
    "TransactionRepository",
    "OrderRepository",
    "SettingRepository",
    # Service Interfaces (Ports)
    "PaymentGateway",
    "PaymentSession",
    "EmailSender",
]
