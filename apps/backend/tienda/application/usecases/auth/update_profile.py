"""USE CASE: Update Profile (nombre, teléfono, dirección de envío del propio usuario)."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.users import Address
from .auth_results import AuthError, AuthErrorCode, AuthResult


@dataclass(frozen=True)
class UpdateProfileInput:
    user_id: UUID
    name: str | None = None
    phone: str | None = None
    address: Address | None = None


class UpdateProfileUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: UpdateProfileInput) -> AuthResult:
        name = input_data.name.strip() if input_data.name is not None else None
        if name is not None and not name:
            return AuthResult(
                error=AuthError(
                    AuthErrorCode.VALIDATION_ERROR, "El nombre no puede estar vacío."
                )
            )

        updated = self._users.update_profile(
            input_data.user_id,
            name=name,
            phone=input_data.phone.strip() if input_data.phone is not None else None,
            address=input_data.address,
        )
        if updated is None:
            return AuthResult(
                error=AuthError(
                    AuthErrorCode.NOT_FOUND, "Usuario no encontrado.", resource="User"
                )
            )
        return AuthResult(user=updated)
