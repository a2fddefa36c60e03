"""
===============================================================================
USE CASE: Register User
===============================================================================

Business Goal:
    Alta self-service de clientes con rol `user`.

Reglas:
    - email y password obligatorios; password >= 6 caracteres.
    - email se normaliza (trim + lower) antes de buscar/persistir.
    - Email ya registrado -> CONFLICT (también si la carrera la detecta la DB).
    - El password se persiste solo como hash Argon2.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    RegisterUserUseCase

Collaborators:
    - UserRepository: get_user_by_email, create_user
    - identity.passwords: hash_password, is_acceptable_password
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.exceptions import DuplicateKeyError
from ....domain.repositories import UserRepository
from ....identity.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    is_acceptable_password,
)
from ....identity.users import UserRole
from .auth_results import AuthError, AuthErrorCode, AuthResult


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


@dataclass(frozen=True)
class RegisterUserInput:
    email: str
    password: str
    name: str | None = None


class RegisterUserUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: RegisterUserInput) -> AuthResult:
        email = normalize_email(input_data.email)
        if not email or "@" not in email or not input_data.password:
            return self._validation_error("Email y contraseña son obligatorios.")

        if not is_acceptable_password(input_data.password):
            return self._validation_error(
                f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres."
            )

        if self._users.get_user_by_email(email) is not None:
            return self._conflict()

        name = (input_data.name or "").strip() or None
        try:
            user = self._users.create_user(
                email=email,
                password_hash=hash_password(input_data.password),
                role=UserRole.USER,
                name=name,
            )
        except DuplicateKeyError:
            # Registro concurrente con el mismo email: ganó el otro.
            return self._conflict()

        return AuthResult(user=user)

    @staticmethod
    def _validation_error(message: str) -> AuthResult:
        return AuthResult(error=AuthError(AuthErrorCode.VALIDATION_ERROR, message))

    @staticmethod
    def _conflict() -> AuthResult:
        return AuthResult(
            error=AuthError(AuthErrorCode.CONFLICT, "El email ya está registrado.")
        )
