"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios para autenticación (por email / id / token de reseteo).
  - Crear usuarios y actualizar password, rol, perfil y token de reseteo.
  - Mapear filas crudas -> entidad `User` y validar `UserRole`.

Collaborators:
  - postgres.base.PostgresRepository (ejecución + errores)
  - identity.users.User / UserRole / Address

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio (política de roles, etc.).
  - Retorna None cuando no existe el recurso.
  - Email duplicado -> DuplicateKeyError (uq_users_email).
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from psycopg.types.json import Jsonb

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import Address, User, UserRole
from .base import PostgresRepository

# R: Lista explícita de columnas: contrato único con la migración.
_USER_COLUMNS = """
    id, email, password_hash, role, name, phone, address,
    reset_token_hash, reset_token_expires_at, created_at
"""

_USER_ORDER_BY = "created_at DESC, id DESC"


def _row_to_user(row: tuple) -> User:
    """R: Role casting estricto: un valor fuera del enum es drift de datos."""
    try:
        role = UserRole(row[3])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[3]}") from exc

    return User(
        id=row[0],
        email=row[1],
        password_hash=row[2],
        role=role,
        name=row[4],
        phone=row[5],
        address=Address.from_dict(row[6]),
        reset_token_hash=row[7],
        reset_token_expires_at=row[8],
        created_at=row[9],
    )


class PostgresUserRepository(PostgresRepository):
    """R: Implementación PostgreSQL del repositorio de usuarios."""

    def _select_one(self, where_sql: str, params: tuple, log_msg: str, extra: dict) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE {where_sql}",
            params=params,
            context_msg=log_msg,
            extra=extra,
        )
        return _row_to_user(row) if row else None

    def _update_returning(
        self, set_sql: str, params: tuple, log_msg: str, extra: dict
    ) -> Optional[User]:
        row = self._fetchone(
            query=f"""
                UPDATE users
                SET {set_sql}
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=params,
            context_msg=log_msg,
            extra=extra,
        )
        return _row_to_user(row) if row else None

    # --- Lectura ---
    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._select_one(
            "email = %s",
            (email,),
            "PostgresUserRepository: get_user_by_email failed",
            {"email": email},
        )

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return self._select_one(
            "id = %s",
            (user_id,),
            "PostgresUserRepository: get_user_by_id failed",
            {"user_id": str(user_id)},
        )

    def get_user_by_reset_token(self, token_hash: str) -> Optional[User]:
        return self._select_one(
            "reset_token_hash = %s AND reset_token_expires_at > now()",
            (token_hash,),
            "PostgresUserRepository: get_user_by_reset_token failed",
            {},
        )

    def list_users(self) -> list[User]:
        rows = self._fetchall(
            query=f"SELECT {_USER_COLUMNS} FROM users ORDER BY {_USER_ORDER_BY}",
            params=(),
            context_msg="PostgresUserRepository: list_users failed",
            extra={},
        )
        return [_row_to_user(r) for r in rows]

    # --- Escritura ---
    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
        name: str | None = None,
    ) -> User:
        user_id = uuid4()
        row = self._fetchone(
            query=f"""
                INSERT INTO users (id, email, password_hash, role, name)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING {_USER_COLUMNS}
            """,
            params=(user_id, email, password_hash, role.value, name),
            context_msg="PostgresUserRepository: create_user failed",
            extra={"user_id": str(user_id), "email": email, "role": role.value},
        )
        if not row:
            raise DatabaseError(
                "PostgresUserRepository: create_user failed (no row returned)"
            )
        return _row_to_user(row)

    def update_password(self, user_id: UUID, password_hash: str) -> Optional[User]:
        return self._update_returning(
            "password_hash = %s",
            (password_hash, user_id),
            "PostgresUserRepository: update_password failed",
            {"user_id": str(user_id)},
        )

    def update_role(self, user_id: UUID, role: UserRole) -> Optional[User]:
        return self._update_returning(
            "role = %s",
            (role.value, user_id),
            "PostgresUserRepository: update_role failed",
            {"user_id": str(user_id), "role": role.value},
        )

    def update_profile(
        self,
        user_id: UUID,
        *,
        name: str | None = None,
        phone: str | None = None,
        address: Address | None = None,
    ) -> Optional[User]:
        updates: list[str] = []
        params: list[object] = []

        if name is not None:
            updates.append("name = %s")
            params.append(name)
        if phone is not None:
            updates.append("phone = %s")
            params.append(phone)
        if address is not None:
            updates.append("address = %s")
            params.append(Jsonb(address.to_dict()))

        if not updates:
            return self.get_user_by_id(user_id)

        params.append(user_id)
        # updates es controlado por código (no input usuario).
        return self._update_returning(
            ", ".join(updates),
            tuple(params),
            "PostgresUserRepository: update_profile failed",
            {"user_id": str(user_id), "fields": len(updates)},
        )

    def set_reset_token(
        self,
        user_id: UUID,
        token_hash: str | None,
        expires_at: datetime | None,
    ) -> Optional[User]:
        return self._update_returning(
            "reset_token_hash = %s, reset_token_expires_at = %s",
            (token_hash, expires_at, user_id),
            "PostgresUserRepository: set_reset_token failed",
            {"user_id": str(user_id), "clear": token_hash is None},
        )

    def consume_reset_token(self, token_hash: str, password_hash: str) -> Optional[User]:
        # R: condición + escritura en un solo UPDATE; un segundo consumo no matchea.
        row = self._fetchone(
            query=f"""
                UPDATE users
                SET password_hash = %s,
                    reset_token_hash = NULL,
                    reset_token_expires_at = NULL
                WHERE reset_token_hash = %s AND reset_token_expires_at > now()
                RETURNING {_USER_COLUMNS}
            """,
            params=(password_hash, token_hash),
            context_msg="PostgresUserRepository: consume_reset_token failed",
            extra={},
        )
        return _row_to_user(row) if row else None
