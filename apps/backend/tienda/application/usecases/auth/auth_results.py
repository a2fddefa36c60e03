"""
===============================================================================
AUTH + USER ADMIN USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Auth Use Case Results

Business Goal:
    Tipos consistentes de resultado y error para:
      - Registro, login, perfil y contraseña propia.
      - Recuperación de contraseña por token.
      - Administración de usuarios (listar, asignar rol, resetear password).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones.
    - El router traduce cada código a HTTP en un único lugar (error_mapping).

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    auth_results models (module)

Responsibilities:
    - AuthErrorCode: conjunto estable de categorías de error.
    - AuthError: contrato mínimo de error.
    - DTOs de resultado por caso de uso.

Collaborators:
    - identity.users: User, UserRole
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....identity.users import User, UserRole


class AuthErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: input inválido/incompleto.
      - INVALID_CREDENTIALS: email/password no coinciden (mensaje único).
      - INVALID_TOKEN: token de recuperación inexistente o vencido.
      - FORBIDDEN: el actor no puede realizar la acción.
      - SELF_MODIFICATION: el actor intenta cambiar su propio rol.
      - NOT_FOUND: usuario inexistente.
      - CONFLICT: email ya registrado.
      - INTERNAL_ERROR: fallo de un colaborador (ej. envío de email).
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    FORBIDDEN = "FORBIDDEN"
    SELF_MODIFICATION = "SELF_MODIFICATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class AuthError:
    code: AuthErrorCode
    message: str
    resource: str | None = None


@dataclass
class AuthResult:
    """
    Resultado con un usuario (registro, login, perfil, contraseña).

    Contrato:
      - Éxito: user != None y error == None
      - Falla: user == None y error != None
    """

    user: User | None = None
    error: AuthError | None = None


@dataclass
class MessageResult:
    """Resultado sin payload de dominio (solo mensaje para el cliente)."""

    message: str = ""
    error: AuthError | None = None


@dataclass
class UserListResult:
    users: List[User] = field(default_factory=list)
    error: AuthError | None = None


@dataclass
class RoleChangeResult:
    user: User | None = None
    previous_role: UserRole | None = None
    error: AuthError | None = None


@dataclass
class AdminPasswordResetResult:
    """
    Incluye la contraseña en texto plano UNA vez para que el admin la
    comunique por fuera del sistema.
    """

    user: User | None = None
    temporary_password: str | None = None
    error: AuthError | None = None
