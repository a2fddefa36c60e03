"""
===============================================================================
USE CASE: Login User
===============================================================================

Reglas:
    - Email desconocido y password incorrecto producen EL MISMO error
      (INVALID_CREDENTIALS, mismo mensaje): no se filtra si la cuenta existe.
    - La emisión del JWT ocurre en el borde HTTP (identity.auth_users).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.repositories import UserRepository
from ....identity.passwords import verify_password
from .auth_results import AuthError, AuthErrorCode, AuthResult
from .register_user import normalize_email

INVALID_CREDENTIALS_MESSAGE = "Credenciales inválidas."


@dataclass(frozen=True)
class LoginUserInput:
    email: str
    password: str


class LoginUserUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: LoginUserInput) -> AuthResult:
        email = normalize_email(input_data.email)
        if not email or not input_data.password:
            return self._invalid_credentials()

        user = self._users.get_user_by_email(email)
        if user is None:
            return self._invalid_credentials()

        if not verify_password(input_data.password, user.password_hash):
            return self._invalid_credentials()

        return AuthResult(user=user)

    @staticmethod
    def _invalid_credentials() -> AuthResult:
        return AuthResult(
            error=AuthError(
                AuthErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
            )
        )
