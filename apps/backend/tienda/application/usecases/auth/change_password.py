"""
===============================================================================
USE CASE: Change Own Password
===============================================================================

Reglas:
    - current_password debe coincidir con el hash guardado (INVALID_CREDENTIALS).
    - new_password >= 6 caracteres (VALIDATION_ERROR).
    - Se persiste un hash nuevo (salt nuevo).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    is_acceptable_password,
    verify_password,
)
from .auth_results import AuthError, AuthErrorCode, AuthResult


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: UUID
    current_password: str
    new_password: str


class ChangePasswordUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: ChangePasswordInput) -> AuthResult:
        user = self._users.get_user_by_id(input_data.user_id)
        if user is None:
            return AuthResult(
                error=AuthError(
                    AuthErrorCode.NOT_FOUND, "Usuario no encontrado.", resource="User"
                )
            )

        if not verify_password(input_data.current_password or "", user.password_hash):
            return AuthResult(
                error=AuthError(
                    AuthErrorCode.INVALID_CREDENTIALS,
                    "La contraseña actual es incorrecta.",
                )
            )

        if not is_acceptable_password(input_data.new_password):
            return AuthResult(
                error=AuthError(
                    AuthErrorCode.VALIDATION_ERROR,
                    f"La nueva contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.",
                )
            )

        updated = self._users.update_password(
            user.id, hash_password(input_data.new_password)
        )
        return AuthResult(user=updated)
