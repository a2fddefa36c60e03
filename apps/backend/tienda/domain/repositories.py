"""
===============================================================================
TARJETA CRC — domain/repositories.py
===============================================================================

Módulo:
    Puertos de Persistencia (Protocols)

Responsabilidades:
    - Definir contratos de persistencia para usuarios, catálogo, ledger de
      transacciones, pedidos y settings.
    - Mantener application/domain independientes de PostgreSQL / memoria.
    - Fijar las garantías de atomicidad que cada implementación debe cumplir.

Colaboradores:
    - domain.entities / identity.users: tipos de entrada/salida.
    - infrastructure.repositories.postgres.*: implementación real.
    - infrastructure.repositories.in_memory.*: implementación para tests.

Reglas:
    - SOLO interfaces: sin SQL, sin side effects.
    - "No encontrado" se expresa con None / False, nunca con excepción.
    - Claves únicas duplicadas -> DuplicateKeyError (crosscutting.exceptions).
    - append_status DEBE agregar al historial y fijar status en UNA escritura.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from ..identity.users import Address, User, UserRole
from .entities import (
    Brand,
    Order,
    Product,
    SettingRecord,
    ShippingChange,
    Transaction,
)
from .ledger import (
    OrderStatus,
    StatusChange,
    TransactionStatus,
)


# ---------------------------------------------------------------------------
# Filtros y read-models
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionFilters:
    status: TransactionStatus | None = None
    start: datetime | None = None
    end: datetime | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class StatusAggregate:
    """Cantidad y monto sumado para un estado."""

    count: int = 0
    amount: float = 0.0


@dataclass(frozen=True, slots=True)
class OrderFilters:
    status: OrderStatus | None = None
    start: datetime | None = None
    end: datetime | None = None


# ---------------------------------------------------------------------------
# Usuarios
# ---------------------------------------------------------------------------


class UserRepository(Protocol):
    """
    R: Persistencia de usuarios.

    El email se guarda normalizado (lower/trim); la unicidad la garantiza
    el storage (create_user -> DuplicateKeyError).
    """

    def get_user_by_email(self, email: str) -> User | None: ...

    def get_user_by_id(self, user_id: UUID) -> User | None: ...

    def get_user_by_reset_token(self, token_hash: str) -> User | None: ...

    def list_users(self) -> list[User]: ...

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
        name: str | None = None,
    ) -> User: ...

    def update_password(self, user_id: UUID, password_hash: str) -> User | None: ...

    def update_role(self, user_id: UUID, role: UserRole) -> User | None: ...

    def update_profile(
        self,
        user_id: UUID,
        *,
        name: str | None = None,
        phone: str | None = None,
        address: Address | None = None,
    ) -> User | None: ...

    def set_reset_token(
        self,
        user_id: UUID,
        token_hash: str | None,
        expires_at: datetime | None,
    ) -> User | None:
        """R: token_hash=None limpia el token (uso único / envío fallido)."""
        ...

    def consume_reset_token(self, token_hash: str, password_hash: str) -> User | None:
        """R: Fija la contraseña y limpia el token en una sola escritura.

        Devuelve None si el token no existe o venció; de dos consumos
        concurrentes del mismo token gana uno solo.
        """
        ...


# ---------------------------------------------------------------------------
# Catálogo
# ---------------------------------------------------------------------------


class ProductRepository(Protocol):
    def create(self, product: Product) -> Product: ...

    def get(self, product_id: UUID) -> Product | None: ...

    def list_products(self, *, brand: Brand | None = None, limit: int | None = None) -> list[Product]:
        """R: Más recientes primero."""
        ...

    def search(self, text: str, *, limit: int = 50) -> list[Product]:
        """R: Substring case-insensitive en name/description/brand."""
        ...

    def update(self, product_id: UUID, changes: dict[str, Any]) -> Product | None: ...

    def delete(self, product_id: UUID) -> bool: ...


# ---------------------------------------------------------------------------
# Ledger de transacciones
# ---------------------------------------------------------------------------


class TransactionRepository(Protocol):
    """
    R: Persistencia del ledger de transacciones.

    Garantías:
      - transaction_id único: create() lanza DuplicateKeyError si ya existe.
      - append_status() agrega la entrada y fija status atómicamente.
      - Los listados ordenan por created_at DESC.
    """

    def create(self, transaction: Transaction) -> Transaction: ...

    def get(self, transaction_id: UUID) -> Transaction | None: ...

    def find_by_external_id(self, external_id: str) -> Transaction | None:
        """R: Busca por transactionId o paymentId del proveedor."""
        ...

    def append_status(
        self,
        transaction_id: UUID,
        change: StatusChange[TransactionStatus],
        *,
        only_if_changed: bool = False,
    ) -> Transaction | None:
        """
        R: Transición atómica.

        only_if_changed=True no escribe si el estado actual ya es change.status
        (devuelve la transacción sin cambios).
        """
        ...

    def update_shipping(
        self,
        transaction_id: UUID,
        change: ShippingChange,
    ) -> Transaction | None: ...

    def update_notes(self, transaction_id: UUID, notes: str | None) -> Transaction | None: ...

    def query(
        self,
        filters: TransactionFilters,
        *,
        limit: int,
        skip: int,
    ) -> tuple[list[Transaction], int]:
        """R: (página, total que matchea los filtros)."""
        ...

    def aggregate_by_status(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[TransactionStatus, StatusAggregate]: ...

    def recent(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 5,
    ) -> list[Transaction]: ...

    def list_for_owner(
        self,
        *,
        user_id: UUID,
        email: str | None,
        status: TransactionStatus | None = None,
        limit: int = 50,
    ) -> list[Transaction]:
        """R: userId coincide O customer.email coincide (case-insensitive)."""
        ...


# ---------------------------------------------------------------------------
# Pedidos (fulfillment)
# ---------------------------------------------------------------------------


class OrderRepository(Protocol):
    def create(self, order: Order) -> Order: ...

    def get(self, order_id: UUID) -> Order | None: ...

    def list_orders(self, filters: OrderFilters) -> list[Order]: ...

    def append_status(
        self, order_id: UUID, change: StatusChange[OrderStatus]
    ) -> Order | None: ...


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class SettingRepository(Protocol):
    def get(self, key: str) -> SettingRecord | None: ...

    def list_settings(self) -> list[SettingRecord]: ...

    def upsert(self, record: SettingRecord) -> SettingRecord: ...

    def delete(self, key: str) -> bool: ...


__all__ = [
    "TransactionFilters",
    "StatusAggregate",
    "OrderFilters",
    "UserRepository",
    "ProductRepository",
    "TransactionRepository",
    "OrderRepository",
    "SettingRepository",
]
