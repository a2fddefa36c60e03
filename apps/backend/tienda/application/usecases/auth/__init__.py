"""
Auth + user admin use cases.
"""

from .assign_role import AssignRoleInput, AssignRoleUseCase
from .auth_results import (
    AdminPasswordResetResult,
    AuthError,
    AuthErrorCode,
    AuthResult,
    MessageResult,
    RoleChangeResult,
    UserListResult,
)
from .change_password import ChangePasswordInput, ChangePasswordUseCase
from .list_users import ListUsersUseCase
from .login_user import INVALID_CREDENTIALS_MESSAGE, LoginUserInput, LoginUserUseCase
from .password_reset import (
    RESET_REQUESTED_MESSAGE,
    ConsumePasswordResetInput,
    ConsumePasswordResetUseCase,
    RequestPasswordResetInput,
    RequestPasswordResetUseCase,
    build_reset_link,
)
from .register_user import RegisterUserInput, RegisterUserUseCase, normalize_email
from .reset_password_by_admin import (
    ResetPasswordByAdminInput,
    ResetPasswordByAdminUseCase,
)
from .update_profile import UpdateProfileInput, UpdateProfileUseCase

__all__ = [
    "AdminPasswordResetResult",
    "AssignRoleInput",
    "AssignRoleUseCase",
    "AuthError",
    "AuthErrorCode",
    "AuthResult",
    "ChangePasswordInput",
    "ChangePasswordUseCase",
    "ConsumePasswordResetInput",
    "ConsumePasswordResetUseCase",
    "INVALID_CREDENTIALS_MESSAGE",
    "ListUsersUseCase",
    "LoginUserInput",
    "LoginUserUseCase",
    "MessageResult",
    "RESET_REQUESTED_MESSAGE",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "RequestPasswordResetInput",
    "RequestPasswordResetUseCase",
    "ResetPasswordByAdminInput",
    "ResetPasswordByAdminUseCase",
    "RoleChangeResult",
    "UpdateProfileInput",
    "UpdateProfileUseCase",
    "UserListResult",
    "build_reset_link",
    "normalize_email",
]
