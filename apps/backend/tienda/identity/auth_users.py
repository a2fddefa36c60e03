"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Autenticación de Usuarios (JWT) + Autorización por capacidades

Responsabilidades:
    - Emitir JWT de acceso con expiración (7 días por defecto).
    - Decodificar y validar JWT (firma, exp, claims mínimos).
    - Resolver usuario actual (token -> user_id -> repo).
    - Exponer dependencias FastAPI (require_user, require_capability).
    - Extraer token desde Authorization: Bearer.

Colaboradores:
    - crosscutting.config.get_settings: secreto y TTL.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - identity.capabilities: tabla rol -> capacidades.
    - container.get_user_repository: repositorio inyectable (override en tests).

Decisiones de diseño:
    - Claims: sub, id, email, role, iat, exp, typ.
    - Mensaje 401 genérico: no distinguimos "usuario borrado" de "token roto".
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
from fastapi import Depends, Header, Request

from ..container import get_user_repository
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from ..domain.repositories import UserRepository
from .capabilities import Capability, has_capability
from .users import User, UserRole

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_ID: str = "id"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Settings de auth (snapshot)."""

    jwt_secret: str
    jwt_access_ttl_minutes: int


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Payload mínimo que esperamos de un access token."""

    user_id: str
    email: str
    role: UserRole


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
    )


# ---------------------------------------------------------------------------
# Tokens JWT (emitir / decodificar)
# ---------------------------------------------------------------------------


def create_access_token(
    user: User, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Crea un JWT de acceso firmado.

    Retorna:
        (token, expires_in_seconds)
    """
    auth_settings = settings or get_auth_settings()

    now = datetime.now(timezone.utc)
    expires_in = int(auth_settings.jwt_access_ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_SUB: str(user.id),
        CLAIM_ID: str(user.id),
        CLAIM_EMAIL: user.email,
        CLAIM_ROLE: user.role.value,
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=expires_in)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_ACCESS,
    }

    token = jwt.encode(payload, auth_settings.jwt_secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(
    token: str, settings: AuthSettings | None = None
) -> TokenPayload:
    """Decodifica y valida un JWT de acceso.

    Errores:
        - 401 si expiró o firma inválida.
        - 401 si faltan claims mínimos.
    """
    auth_settings = settings or get_auth_settings()

    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_EMAIL, CLAIM_ROLE, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expirado.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Token inválido.") from exc

    user_id = payload.get(CLAIM_SUB)
    email = payload.get(CLAIM_EMAIL)
    role_value = payload.get(CLAIM_ROLE)
    token_type = payload.get(CLAIM_TYP)

    if not user_id or not email or not role_value:
        raise unauthorized("Token inválido.")

    if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
        raise unauthorized("Tipo de token inválido.")

    try:
        role = UserRole(str(role_value))
    except ValueError as exc:
        raise unauthorized("Token inválido.") from exc

    return TokenPayload(user_id=str(user_id), email=str(email), role=role)


def get_current_user(token: str, users: UserRepository) -> User:
    """Resuelve el usuario actual a partir del access token.

    El rol se lee del registro persistido (un cambio de rol aplica sin
    esperar a que expire el token).
    """
    payload = decode_access_token(token)

    try:
        user_id = UUID(payload.user_id)
    except ValueError as exc:
        raise unauthorized("Token inválido.") from exc

    user = users.get_user_by_id(user_id)
    if not user:
        raise unauthorized("Token inválido.")
    return user


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_user() -> Callable:
    """Dependency FastAPI: requiere usuario autenticado por JWT."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        users: UserRepository = Depends(get_user_repository),
    ) -> User:
        token = _extract_bearer_token(authorization)
        if not token:
            raise unauthorized("Falta token Bearer.")

        user = get_current_user(token, users)
        request.state.user = user
        return user

    return dependency


def require_capability(capability: Capability) -> Callable:
    """Dependency FastAPI: el rol del usuario debe incluir la capacidad."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        users: UserRepository = Depends(get_user_repository),
    ) -> User:
        user = await require_user()(request, authorization, users)
        if not has_capability(user.role, capability):
            logger.warning(
                "Acceso denegado por capacidad",
                extra={
                    "user_id": str(user.id),
                    "role": user.role.value,
                    "capability": capability.value,
                },
            )
            raise forbidden("Rol insuficiente.")
        return user

    return dependency

