"""
USE CASE: Reset Password by Admin

Fija la contraseña del usuario objetivo al valor por defecto configurado
(ADMIN_RESET_DEFAULT_PASSWORD) y la devuelve una vez para que el admin la
comunique. No distingue el rol del usuario objetivo.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....audit import emit_audit_event
from ....domain.repositories import UserRepository
from ....identity.passwords import hash_password
from ....identity.users import User
from .auth_results import AdminPasswordResetResult, AuthError, AuthErrorCode


@dataclass(frozen=True)
class ResetPasswordByAdminInput:
    actor: User
    target_user_id: UUID


class ResetPasswordByAdminUseCase:
    def __init__(self, user_repository: UserRepository, *, default_password: str) -> None:
        self._users = user_repository
        self._default_password = default_password

    def execute(self, input_data: ResetPasswordByAdminInput) -> AdminPasswordResetResult:
        target = self._users.get_user_by_id(input_data.target_user_id)
        if target is None:
            return AdminPasswordResetResult(
                error=AuthError(
                    AuthErrorCode.NOT_FOUND, "Usuario no encontrado.", resource="User"
                )
            )

        actor = input_data.actor
        updated = self._users.update_password(
            target.id, hash_password(self._default_password)
        )
        # R: un token de recuperación pendiente queda invalidado.
        self._users.set_reset_token(target.id, None, None)

        emit_audit_event(
            action="users.password_reset",
            message=f"[AUDIT] {actor.email} reset password of {target.email}",
            actor=str(actor.id),
            target=str(target.id),
        )
        return AdminPasswordResetResult(
            user=updated or target, temporary_password=self._default_password
        )
