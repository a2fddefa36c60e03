"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Product, Transaction, Order, SettingRecord)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Brindar helpers mínimos para mantener invariantes simples:
        * subtotal = unit_price * quantity (calculado al crear el ítem)
        * amount = suma de subtotales al crear (nunca se recalcula al leer)
        * status = último estado del historial (vía StatusLedger)
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.ledger: StatusLedger y vocabularios de estado.
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases: construyen/consumen estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Datos + comportamiento mínimo.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable
from uuid import UUID

from .ledger import (
    OrderStatus,
    ShippingStatus,
    StatusChange,
    StatusLedger,
    TransactionStatus,
    utcnow,
)

# ---------------------------------------------------------------------------
# Product (catálogo)
# ---------------------------------------------------------------------------


class Brand(str, Enum):
    NATURA = "natura"
    AVON = "avon"
    ARBELL = "arbell"


class Category(str, Enum):
    MAQUILLAJE = "maquillaje"
    PERFUMERIA = "perfumeria"
    CUIDADOS = "cuidados"
    OTROS = "otros"


@dataclass
class Product:
    """Producto del catálogo. Solo admin/developer lo crean o modifican."""

    id: UUID
    name: str
    price: float
    image: str
    brand: Brand
    category: Category = Category.OTROS
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def matches(self, text: str) -> bool:
        """Búsqueda case-insensitive por substring en nombre/descripción/marca."""
        needle = text.strip().lower()
        haystacks = (self.name, self.description or "", self.brand.value)
        return any(needle in value.lower() for value in haystacks)


# ---------------------------------------------------------------------------
# Transaction (ledger de pagos)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LineItem:
    """Ítem de compra con subtotal congelado al momento de crear."""

    title: str
    unit_price: float
    quantity: int
    subtotal: float
    description: str | None = None

    @classmethod
    def of(
        cls,
        title: str,
        unit_price: float,
        quantity: int,
        description: str | None = None,
    ) -> "LineItem":
        return cls(
            title=title,
            unit_price=unit_price,
            quantity=quantity,
            subtotal=unit_price * quantity,
            description=description,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        return cls(
            title=data["title"],
            unit_price=data["unit_price"],
            quantity=data["quantity"],
            subtotal=data.get("subtotal", data["unit_price"] * data["quantity"]),
            description=data.get("description"),
        )


def total_of(items: Iterable[LineItem]) -> float:
    return sum(item.subtotal for item in items)


@dataclass(frozen=True, slots=True)
class CustomerInfo:
    """Snapshot de contacto del comprador al momento de la compra."""

    email: str | None = None
    name: str | None = None
    phone: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "name": self.name, "phone": self.phone}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CustomerInfo":
        data = data or {}
        return cls(email=data.get("email"), name=data.get("name"), phone=data.get("phone"))


@dataclass(frozen=True, slots=True)
class ShippingChange:
    """Entrada del log de envío (estado y/o tracking actualizados)."""

    changed_at: datetime
    shipping_status: ShippingStatus | None = None
    tracking_number: str | None = None
    changed_by: UUID | None = None
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "shippingStatus": self.shipping_status.value if self.shipping_status else None,
            "trackingNumber": self.tracking_number,
            "changedAt": self.changed_at.isoformat(),
            "changedBy": str(self.changed_by) if self.changed_by else None,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShippingChange":
        changed_at = data.get("changedAt")
        changed_by = data.get("changedBy")
        status = data.get("shippingStatus")
        return cls(
            changed_at=(
                datetime.fromisoformat(changed_at)
                if isinstance(changed_at, str)
                else (changed_at or utcnow())
            ),
            shipping_status=ShippingStatus(status) if status else None,
            tracking_number=data.get("trackingNumber"),
            changed_by=UUID(str(changed_by)) if changed_by else None,
            note=data.get("note"),
        )


@dataclass
class Transaction:
    """
    Intento de compra registrado en el ledger.

    Importante:
      - status NO es un campo: se deriva del último StatusChange.
      - Toda transición pasa por apply_status() (o su equivalente atómico en DB).
    """

    id: UUID
    transaction_id: str
    items: list[LineItem]
    amount: float
    ledger: StatusLedger[TransactionStatus]
    payment_id: str | None = None
    user_id: UUID | None = None
    customer: CustomerInfo = field(default_factory=CustomerInfo)
    payment_method: str | None = None
    payment_type: str | None = None
    notes: str | None = None
    webhook_data: dict[str, Any] | None = None
    shipping_status: ShippingStatus | None = None
    tracking_number: str | None = None
    shipping_history: list[ShippingChange] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def status(self) -> TransactionStatus:
        current = self.ledger.current
        if current is None:
            raise ValueError("Transaction without status history")
        return current

    @property
    def status_history(self) -> tuple[StatusChange[TransactionStatus], ...]:
        return self.ledger.entries

    def apply_status(self, change: StatusChange[TransactionStatus]) -> None:
        self.ledger.record(
            change.status,
            changed_by=change.changed_by,
            note=change.note,
            at=change.changed_at,
        )
        self.updated_at = change.changed_at

    def apply_shipping(self, change: ShippingChange) -> None:
        if change.shipping_status is not None:
            self.shipping_status = change.shipping_status
        if change.tracking_number is not None:
            self.tracking_number = change.tracking_number
        self.shipping_history.append(change)
        self.updated_at = change.changed_at

    def is_owned_by(self, user_id: UUID, email: str | None) -> bool:
        """Dueño = mismo userId o mismo email de contacto (checkout como invitado)."""
        if self.user_id is not None and self.user_id == user_id:
            return True
        if email and self.customer.email:
            return self.customer.email.strip().lower() == email.strip().lower()
        return False


# ---------------------------------------------------------------------------
# Order (vista interna de fulfillment)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderItem:
    product_id: str
    name: str
    brand: str
    price: float
    quantity: int
    subtotal: float

    @classmethod
    def of(
        cls, product_id: str, name: str, brand: str, price: float, quantity: int
    ) -> "OrderItem":
        return cls(
            product_id=product_id,
            name=name,
            brand=brand,
            price=price,
            quantity=quantity,
            subtotal=price * quantity,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "brand": self.brand,
            "price": self.price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderItem":
        return cls(
            product_id=data["productId"],
            name=data["name"],
            brand=data["brand"],
            price=data["price"],
            quantity=data["quantity"],
            subtotal=data.get("subtotal", data["price"] * data["quantity"]),
        )


@dataclass
class Order:
    """Pedido post-pago con su propio historial de preparación."""

    id: UUID
    user_id: UUID
    user_email: str
    user_name: str
    items: list[OrderItem]
    total: float
    ledger: StatusLedger[OrderStatus]
    payment_id: str
    payment_status: str
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def status(self) -> OrderStatus:
        current = self.ledger.current
        if current is None:
            raise ValueError("Order without status history")
        return current

    @property
    def status_history(self) -> tuple[StatusChange[OrderStatus], ...]:
        return self.ledger.entries

    def apply_status(self, change: StatusChange[OrderStatus]) -> None:
        self.ledger.record(
            change.status,
            changed_by=change.changed_by,
            note=change.note,
            at=change.changed_at,
        )
        self.updated_at = change.changed_at


# ---------------------------------------------------------------------------
# Settings persistidos
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SettingRecord:
    """Fila almacenada de configuración (si no existe, aplica el default)."""

    key: str
    value: dict[str, Any]
    updated_by: UUID | None = None
    updated_at: datetime | None = None
