"""
===============================================================================
TASK: Dev Seed Admin (no-production + E2E override)
===============================================================================

Qué es:
    Asegura que exista una cuenta privilegiada (por defecto `developer`) para
    desarrollo local y CI, ya que el registro público solo crea rol `user`.

Seguridad:
    - Nunca corre en producción (fail-fast).
    - E2E_SEED_ADMIN=1 permite sembrar con credenciales de CI.

CRC:
    Component: ensure_dev_admin
    Responsibilities:
      - Validar guard de ambiente
      - Resolver email/password/rol (settings vs env E2E)
      - Crear la cuenta o, con force_reset, re-aplicar password y rol
    Collaborators:
      - UserRepository (get_user_by_email, create_user, update_password, update_role)
      - password_hasher (identity.passwords.hash_password)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Final, Mapping

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.repositories import UserRepository
from ..identity.users import UserRole

_ENV_FLAG_E2E_SEED_ADMIN: Final[str] = "E2E_SEED_ADMIN"
_ENV_E2E_ADMIN_EMAIL: Final[str] = "E2E_ADMIN_EMAIL"
_ENV_E2E_ADMIN_PASSWORD: Final[str] = "E2E_ADMIN_PASSWORD"

_DEFAULT_E2E_EMAIL: Final[str] = "admin@local"
_DEFAULT_E2E_PASSWORD: Final[str] = "admin123"


@dataclass(frozen=True, slots=True)
class _AdminSeedSpec:
    enabled: bool
    is_e2e: bool
    email: str
    password: str
    role: UserRole
    force_reset: bool


def _parse_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _resolve_role(role_str: str) -> UserRole:
    try:
        return UserRole((role_str or "").strip().lower())
    except ValueError:
        logger.warning(
            "Dev seed admin: invalid role; falling back to DEVELOPER",
            extra={"role": role_str},
        )
        return UserRole.DEVELOPER


def _resolve_seed_spec(settings: Settings, env: Mapping[str, str]) -> _AdminSeedSpec:
    is_e2e = _parse_bool(env.get(_ENV_FLAG_E2E_SEED_ADMIN))
    if not (settings.dev_seed_admin or is_e2e):
        return _AdminSeedSpec(False, is_e2e, "", "", UserRole.DEVELOPER, False)

    if is_e2e:
        return _AdminSeedSpec(
            enabled=True,
            is_e2e=True,
            email=env.get(_ENV_E2E_ADMIN_EMAIL, _DEFAULT_E2E_EMAIL).strip().lower(),
            password=env.get(_ENV_E2E_ADMIN_PASSWORD, _DEFAULT_E2E_PASSWORD),
            role=UserRole.DEVELOPER,
            force_reset=False,
        )

    return _AdminSeedSpec(
        enabled=True,
        is_e2e=False,
        email=(settings.dev_seed_admin_email or "").strip().lower(),
        password=settings.dev_seed_admin_password or "",
        role=_resolve_role(settings.dev_seed_admin_role),
        force_reset=bool(settings.dev_seed_admin_force_reset),
    )


def ensure_dev_admin(
    settings: Settings,
    *,
    user_repo: UserRepository,
    password_hasher: Callable[[str], str],
    env: Mapping[str, str],
) -> None:
    """
    Crea la cuenta si falta; con force_reset re-aplica password y rol.
    Deshabilitado -> no-op.
    """
    spec = _resolve_seed_spec(settings, env)
    if not spec.enabled:
        return

    if settings.is_production():
        raise RuntimeError(
            "FATAL: DEV_SEED_ADMIN is enabled in production. "
            "Safety guard prevents seeding privileged accounts."
        )

    if not spec.email or not spec.password:
        raise ValueError("Dev seed admin is enabled but email/password are empty")

    existing = user_repo.get_user_by_email(spec.email)
    if existing is None:
        user_repo.create_user(
            email=spec.email,
            password_hash=password_hasher(spec.password),
            role=spec.role,
            name="Dev Admin",
        )
        logger.info(
            "Dev seed admin: user created",
            extra={"email": spec.email, "role": spec.role.value, "is_e2e": spec.is_e2e},
        )
        return

    if spec.force_reset:
        user_repo.update_password(existing.id, password_hasher(spec.password))
        user_repo.update_role(existing.id, spec.role)
        logger.info(
            "Dev seed admin: user reset applied",
            extra={"email": spec.email, "role": spec.role.value},
        )
        return

    logger.info("Dev seed admin: user exists; skipping", extra={"email": spec.email})
