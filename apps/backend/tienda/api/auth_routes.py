"""
===============================================================================
TARJETA CRC — tienda/api/auth_routes.py (Autenticación y Cuenta de Usuario)
===============================================================================

Responsabilidades:
  - Registro y login con emisión de JWT (Bearer).
  - Perfil propio: consulta, actualización y cambio de contraseña.
  - Recuperación de contraseña por email (solicitud + consumo de token).
  - Montar la administración de usuarios también bajo /auth/users.

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> caso de uso.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - application.usecases.auth
  - identity.auth_users: create_access_token, require_user
  - api.admin_routes.build_users_router
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..application.usecases.auth import (
    ChangePasswordInput,
    ChangePasswordUseCase,
    ConsumePasswordResetInput,
    ConsumePasswordResetUseCase,
    LoginUserInput,
    LoginUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    RequestPasswordResetInput,
    RequestPasswordResetUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from ..container import (
    get_change_password_use_case,
    get_consume_password_reset_use_case,
    get_login_user_use_case,
    get_register_user_use_case,
    get_request_password_reset_use_case,
    get_update_profile_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.auth_users import create_access_token, require_user
from ..identity.users import User
from ..interfaces.api.http.error_mapping import raise_auth_error
from ..interfaces.api.http.schemas.users import (
    AuthRes,
    ChangePasswordReq,
    ForgotPasswordReq,
    LoginReq,
    MeRes,
    MessageRes,
    RegisterReq,
    ResetPasswordReq,
    UpdateProfileReq,
    to_user_res,
)
from .admin_routes import build_users_router

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


def _issue_token(user: User) -> AuthRes:
    token, expires_in = create_access_token(user)
    return AuthRes(token=token, expires_in=expires_in, user=to_user_res(user))


# -----------------------------------------------------------------------------
# Endpoints públicos
# -----------------------------------------------------------------------------


@router.post("/register", response_model=AuthRes)
def register(
    req: RegisterReq,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    """Crea una cuenta con rol user y devuelve un JWT listo para usar."""
    result = use_case.execute(
        RegisterUserInput(email=req.email, password=req.password, name=req.name)
    )
    if result.error is not None:
        raise_auth_error(result.error)
    return _issue_token(result.user)


@router.post("/login", response_model=AuthRes)
def login(
    req: LoginReq,
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
):
    """Inicia sesión y devuelve JWT (mensaje genérico ante cualquier falla)."""
    result = use_case.execute(LoginUserInput(email=req.email, password=req.password))
    if result.error is not None:
        raise_auth_error(result.error)
    return _issue_token(result.user)


@router.post("/forgot-password", response_model=MessageRes)
def forgot_password(
    req: ForgotPasswordReq,
    use_case: RequestPasswordResetUseCase = Depends(get_request_password_reset_use_case),
):
    """Respuesta idéntica exista o no el email."""
    result = use_case.execute(RequestPasswordResetInput(email=req.email or ""))
    if result.error is not None:
        raise_auth_error(result.error)
    return MessageRes(message=result.message)


@router.post("/reset-password", response_model=MessageRes)
def reset_password(
    req: ResetPasswordReq,
    use_case: ConsumePasswordResetUseCase = Depends(get_consume_password_reset_use_case),
):
    result = use_case.execute(
        ConsumePasswordResetInput(
            token=req.token or "", new_password=req.new_password or ""
        )
    )
    if result.error is not None:
        raise_auth_error(result.error)
    return MessageRes(message="Contraseña actualizada correctamente.")


# -----------------------------------------------------------------------------
# Cuenta propia (Bearer)
# -----------------------------------------------------------------------------


@router.get("/me", response_model=MeRes)
def me(user: User = Depends(require_user())):
    return MeRes(user=to_user_res(user))


@router.put("/profile", response_model=MeRes)
def update_profile(
    req: UpdateProfileReq,
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
    user: User = Depends(require_user()),
):
    result = use_case.execute(
        UpdateProfileInput(
            user_id=user.id,
            name=req.name,
            phone=req.phone,
            address=req.address.to_domain() if req.address is not None else None,
        )
    )
    if result.error is not None:
        raise_auth_error(result.error, target_id=user.id)
    return MeRes(user=to_user_res(result.user))


@router.put("/change-password", response_model=MessageRes)
def change_password(
    req: ChangePasswordReq,
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
    user: User = Depends(require_user()),
):
    result = use_case.execute(
        ChangePasswordInput(
            user_id=user.id,
            current_password=req.current_password,
            new_password=req.new_password,
        )
    )
    if result.error is not None:
        raise_auth_error(result.error, target_id=user.id)
    return MessageRes(message="Contraseña actualizada correctamente.")


# R: Panel de usuarios también bajo /auth/users.
router.include_router(build_users_router("/users"))

__all__ = ["router"]
