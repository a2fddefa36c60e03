"""
===============================================================================
TARJETA CRC — schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP de usuarios (auth + panel de usuarios)

Responsabilidades:
    - Proyección pública del usuario (NUNCA incluye hashes ni tokens).
    - DTOs de perfil, contraseñas, roles y recuperación.

Colaboradores:
    - identity.users.User / Address / UserRole
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from tienda.identity.users import Address, User, UserRole

from .base import CamelModel


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class AddressDTO(CamelModel):
    street: str | None = Field(default=None, max_length=200)
    number: str | None = Field(default=None, max_length=20)
    city: str | None = Field(default=None, max_length=120)
    postal_code: str | None = Field(default=None, max_length=20)

    def to_domain(self) -> Address:
        return Address(
            street=self.street,
            number=self.number,
            city=self.city,
            postal_code=self.postal_code,
        )


class RegisterReq(CamelModel):
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=512)
    name: str | None = Field(default=None, max_length=200)


class LoginReq(CamelModel):
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=512)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


class UpdateProfileReq(CamelModel):
    name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    address: AddressDTO | None = None


class ChangePasswordReq(CamelModel):
    current_password: str = Field(..., max_length=512)
    new_password: str = Field(..., max_length=512)


class ForgotPasswordReq(CamelModel):
    email: str | None = Field(default=None, max_length=320)


class ResetPasswordReq(CamelModel):
    token: str | None = Field(default=None, max_length=256)
    new_password: str | None = Field(default=None, max_length=512)


class AssignRoleReq(CamelModel):
    role: str = Field(..., max_length=32)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRes(CamelModel):
    id: UUID
    email: str
    name: str | None = None
    role: UserRole
    phone: str | None = None
    address: AddressDTO | None = None
    created_at: datetime | None = None


class AuthRes(CamelModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRes


class MeRes(CamelModel):
    user: UserRes


class UsersListRes(CamelModel):
    users: list[UserRes]


class MessageRes(CamelModel):
    message: str


class RoleChangeRes(CamelModel):
    message: str
    user: UserRes
    previous_role: UserRole | None = None


class AdminPasswordResetRes(CamelModel):
    message: str
    user: UserRes
    temporary_password: str


def to_user_res(user: User) -> UserRes:
    """Mapea entidad de dominio -> DTO HTTP."""
    address = None
    if user.address is not None:
        address = AddressDTO(
            street=user.address.street,
            number=user.address.number,
            city=user.address.city,
            postal_code=user.address.postal_code,
        )
    return UserRes(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        phone=user.phone,
        address=address,
        created_at=user.created_at,
    )
