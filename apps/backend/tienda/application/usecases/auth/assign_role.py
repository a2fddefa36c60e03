"""
===============================================================================
USE CASE: Assign Role
===============================================================================

Business Goal:
    Cambiar el rol de otro usuario desde el panel de administración.

Reglas:
    - El rol destino debe existir (VALIDATION_ERROR).
    - Nadie cambia su propio rol (SELF_MODIFICATION).
    - Otorgar `developer` requiere USERS_GRANT_DEVELOPER (FORBIDDEN).
    - Cada cambio efectivo emite una línea de auditoría.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    AssignRoleUseCase

Collaborators:
    - UserRepository: get_user_by_id, update_role
    - identity.capabilities: has_capability
    - audit: emit_audit_event, format_role_change
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....audit import emit_audit_event, format_role_change
from ....domain.repositories import UserRepository
from ....identity.capabilities import Capability, has_capability
from ....identity.users import User, UserRole
from .auth_results import AuthError, AuthErrorCode, RoleChangeResult


@dataclass(frozen=True)
class AssignRoleInput:
    actor: User
    target_user_id: UUID
    role: str


class AssignRoleUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: AssignRoleInput) -> RoleChangeResult:
        try:
            new_role = UserRole(str(input_data.role).strip().lower())
        except ValueError:
            allowed = ", ".join(r.value for r in UserRole)
            return self._error(
                AuthErrorCode.VALIDATION_ERROR,
                f"Rol inválido. Valores permitidos: {allowed}",
            )

        actor = input_data.actor
        if actor.id == input_data.target_user_id:
            return self._error(
                AuthErrorCode.SELF_MODIFICATION, "No podés modificar tu propio rol."
            )

        target = self._users.get_user_by_id(input_data.target_user_id)
        if target is None:
            return self._error(AuthErrorCode.NOT_FOUND, "Usuario no encontrado.")

        if new_role == UserRole.DEVELOPER and not has_capability(
            actor.role, Capability.USERS_GRANT_DEVELOPER
        ):
            return self._error(
                AuthErrorCode.FORBIDDEN, "Solo un developer puede otorgar el rol developer."
            )

        previous_role = target.role
        if previous_role == new_role:
            return RoleChangeResult(user=target, previous_role=previous_role)

        updated = self._users.update_role(target.id, new_role)
        if updated is None:
            return self._error(AuthErrorCode.NOT_FOUND, "Usuario no encontrado.")

        emit_audit_event(
            action="users.role_changed",
            message=format_role_change(
                actor.email, target.email, previous_role.value, new_role.value
            ),
            actor=str(actor.id),
            target=str(target.id),
            metadata={"previous_role": previous_role.value, "new_role": new_role.value},
        )
        return RoleChangeResult(user=updated, previous_role=previous_role)

    @staticmethod
    def _error(code: AuthErrorCode, message: str) -> RoleChangeResult:
        resource = "User" if code == AuthErrorCode.NOT_FOUND else None
        return RoleChangeResult(error=AuthError(code, message, resource=resource))
