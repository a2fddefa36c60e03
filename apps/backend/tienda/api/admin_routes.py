"""
===============================================================================
TARJETA CRC — tienda/api/admin_routes.py (Gestión de Usuarios)
===============================================================================

Responsabilidades:
  - Exponer el panel de usuarios: listado, asignación de rol y reset de
    contraseña por un administrador.
  - Reutilizar casos de uso (sin lógica de negocio en la capa HTTP).
  - Aplicar autorización por capacidades (USERS_*).

Patrones aplicados:
  - Thin Controller: orquesta dependencias, no contiene reglas de negocio.
  - Factory: build_users_router(prefix) monta las mismas rutas bajo
    /users y /auth/users.

Colaboradores:
  - application.usecases.auth (ListUsers / AssignRole / ResetPasswordByAdmin)
  - identity.auth_users.require_capability
  - interfaces.api.http.error_mapping.raise_auth_error
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from ..application.usecases.auth import (
    AssignRoleInput,
    AssignRoleUseCase,
    ListUsersUseCase,
    ResetPasswordByAdminInput,
    ResetPasswordByAdminUseCase,
)
from ..container import (
    get_assign_role_use_case,
    get_list_users_use_case,
    get_reset_password_by_admin_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.auth_users import require_capability
from ..identity.capabilities import Capability
from ..identity.users import User
from ..interfaces.api.http.error_mapping import raise_auth_error
from ..interfaces.api.http.schemas.users import (
    AdminPasswordResetRes,
    AssignRoleReq,
    RoleChangeRes,
    UsersListRes,
    to_user_res,
)


def build_users_router(prefix: str) -> APIRouter:
    """Construye el router de administración de usuarios bajo `prefix`."""
    router = APIRouter(prefix=prefix, tags=["users"], responses=OPENAPI_ERROR_RESPONSES)

    @router.get("", response_model=UsersListRes)
    def list_users(
        use_case: ListUsersUseCase = Depends(get_list_users_use_case),
        _user: User = Depends(require_capability(Capability.USERS_READ)),
    ):
        result = use_case.execute()
        return UsersListRes(users=[to_user_res(u) for u in result.users])

    @router.put("/{user_id}/role", response_model=RoleChangeRes)
    def assign_role(
        user_id: UUID,
        req: AssignRoleReq,
        use_case: AssignRoleUseCase = Depends(get_assign_role_use_case),
        actor: User = Depends(require_capability(Capability.USERS_ASSIGN_ROLE)),
    ):
        result = use_case.execute(
            AssignRoleInput(actor=actor, target_user_id=user_id, role=req.role)
        )
        if result.error is not None:
            raise_auth_error(result.error, target_id=user_id)
        return RoleChangeRes(
            message="Rol actualizado.",
            user=to_user_res(result.user),
            previous_role=result.previous_role,
        )

    @router.put("/{user_id}/reset-password", response_model=AdminPasswordResetRes)
    def reset_password(
        user_id: UUID,
        use_case: ResetPasswordByAdminUseCase = Depends(
            get_reset_password_by_admin_use_case
        ),
        actor: User = Depends(require_capability(Capability.USERS_RESET_PASSWORD)),
    ):
        result = use_case.execute(
            ResetPasswordByAdminInput(actor=actor, target_user_id=user_id)
        )
        if result.error is not None:
            raise_auth_error(result.error, target_id=user_id)
        return AdminPasswordResetRes(
            message="Contraseña restablecida.",
            user=to_user_res(result.user),
            temporary_password=result.temporary_password,
        )

    return router


router = build_users_router("/users")

__all__ = ["router", "build_users_router"]
