"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario (JWT + perfil)

Responsabilidades:
    - Definir el enum de roles de la tienda (user / admin / developer).
    - Definir el dataclass User usado por auth, perfil y administración.

Colaboradores:
    - identity/capabilities.py: tabla rol -> capacidades.
    - identity/auth_users.py: emite/valida JWT con User y UserRole.
    - infrastructure/repositories/*/user.py: mapean filas -> User.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - El orden de roles no implica herencia: los permisos viven en capabilities.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados por la tienda."""

    USER = "user"
    ADMIN = "admin"
    DEVELOPER = "developer"


@dataclass(frozen=True, slots=True)
class Address:
    """Dirección de envío declarada en el perfil."""

    street: str | None = None
    number: str | None = None
    city: str | None = None
    postal_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "street": self.street,
            "number": self.number,
            "city": self.city,
            "postalCode": self.postal_code,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Address | None":
        if not data:
            return None
        return cls(
            street=data.get("street"),
            number=data.get("number"),
            city=data.get("city"),
            postal_code=data.get("postalCode") or data.get("postal_code"),
        )


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario (credenciales + perfil + reseteo de contraseña)."""

    id: UUID
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    name: str | None = None
    phone: str | None = None
    address: Address | None = None
    reset_token_hash: str | None = field(default=None, repr=False)
    reset_token_expires_at: datetime | None = None
    created_at: datetime | None = None
