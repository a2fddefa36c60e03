"""
===============================================================================
TARJETA CRC — identity/capabilities.py
===============================================================================

Módulo:
    Tabla de capacidades por rol (autorización en un único lugar)

Responsabilidades:
    - Definir el catálogo de capacidades (Capability).
    - Definir la tabla explícita rol -> capacidades (ROLE_CAPABILITIES).
    - Resolver si un rol tiene una capacidad (has_capability).

Colaboradores:
    - identity.users.UserRole: catálogo de roles.
    - identity.auth_users.require_capability: dependencia FastAPI.
    - application.usecases.auth.assign_role: regla de otorgar "developer".

Notas de diseño:
    - No hay herencia entre roles: cada rol enumera lo que puede hacer.
      developer tiene más capacidades que admin por convención, no por jerarquía.
    - Otorgar el rol developer es una capacidad separada que admin NO tiene.
    - Cambiar quién puede qué = editar esta tabla (los routers no tienen listas).
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from .users import UserRole


class Capability(str, Enum):
    """Acciones protegidas de la tienda."""

    # Compras propias (cualquier usuario autenticado)
    ORDERS_OWN = "orders:own"

    # Catálogo
    CATALOG_MANAGE = "catalog:manage"

    # Usuarios
    USERS_READ = "users:read"
    USERS_ASSIGN_ROLE = "users:assign_role"
    USERS_GRANT_DEVELOPER = "users:grant_developer"
    USERS_RESET_PASSWORD = "users:reset_password"

    # Ledger de transacciones y pedidos
    LEDGER_READ = "ledger:read"
    LEDGER_MANAGE = "ledger:manage"
    ORDERS_MANAGE = "orders:manage"

    # Configuración del sitio
    SETTINGS_MANAGE = "settings:manage"


_STAFF: frozenset[Capability] = frozenset(
    {
        Capability.ORDERS_OWN,
        Capability.CATALOG_MANAGE,
        Capability.USERS_READ,
        Capability.USERS_ASSIGN_ROLE,
        Capability.USERS_RESET_PASSWORD,
        Capability.LEDGER_READ,
        Capability.LEDGER_MANAGE,
        Capability.ORDERS_MANAGE,
    }
)

ROLE_CAPABILITIES: Mapping[UserRole, frozenset[Capability]] = {
    UserRole.USER: frozenset({Capability.ORDERS_OWN}),
    UserRole.ADMIN: _STAFF,
    UserRole.DEVELOPER: _STAFF
    | {Capability.USERS_GRANT_DEVELOPER, Capability.SETTINGS_MANAGE},
}


def capabilities_for(role: UserRole) -> frozenset[Capability]:
    """Capacidades del rol (vacío si el rol no está en la tabla)."""
    return ROLE_CAPABILITIES.get(role, frozenset())


def has_capability(role: UserRole | None, capability: Capability) -> bool:
    if role is None:
        return False
    return capability in capabilities_for(role)
