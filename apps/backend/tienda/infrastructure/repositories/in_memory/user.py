"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / CI).
  - Replicar la unicidad de email del esquema (DuplicateKeyError).
  - Mantener el ordering de Postgres (created_at DESC).

Collaborators:
  - identity.users.User / UserRole / Address
  - domain.repositories.UserRepository (contrato)

Constraints:
  - Thread-safe: acceso protegido por Lock.
  - User es inmutable: cada update reemplaza la entrada con dataclasses.replace.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Dict, Optional
from uuid import UUID, uuid4

from ....crosscutting.exceptions import DuplicateKeyError
from ....domain.ledger import utcnow
from ....identity.users import Address, User, UserRole


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def _replace(self, user_id: UUID, **changes) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = replace(user, **changes)
            self._users[user_id] = updated
            return updated

    # --- Lectura ---
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def _match_reset_token(self, token_hash: str) -> Optional[User]:
        # R: llamar con el lock tomado.
        now = utcnow()
        return next(
            (
                u
                for u in self._users.values()
                if u.reset_token_hash == token_hash
                and u.reset_token_expires_at is not None
                and u.reset_token_expires_at > now
            ),
            None,
        )

    def get_user_by_reset_token(self, token_hash: str) -> Optional[User]:
        with self._lock:
            return self._match_reset_token(token_hash)

    def list_users(self) -> list[User]:
        with self._lock:
            values = list(self._users.values())
        return sorted(values, key=lambda u: u.created_at or utcnow(), reverse=True)

    # --- Escritura ---
    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
        name: str | None = None,
    ) -> User:
        with self._lock:
            if any(u.email == email for u in self._users.values()):
                raise DuplicateKeyError(
                    "InMemoryUserRepository: duplicate email", key="uq_users_email"
                )
            user = User(
                id=uuid4(),
                email=email,
                password_hash=password_hash,
                role=role,
                name=name,
                created_at=utcnow(),
            )
            self._users[user.id] = user
            return user

    def update_password(self, user_id: UUID, password_hash: str) -> Optional[User]:
        return self._replace(user_id, password_hash=password_hash)

    def update_role(self, user_id: UUID, role: UserRole) -> Optional[User]:
        return self._replace(user_id, role=role)

    def update_profile(
        self,
        user_id: UUID,
        *,
        name: str | None = None,
        phone: str | None = None,
        address: Address | None = None,
    ) -> Optional[User]:
        changes = {
            key: value
            for key, value in (("name", name), ("phone", phone), ("address", address))
            if value is not None
        }
        return self._replace(user_id, **changes)

    def set_reset_token(
        self,
        user_id: UUID,
        token_hash: str | None,
        expires_at: datetime | None,
    ) -> Optional[User]:
        return self._replace(
            user_id, reset_token_hash=token_hash, reset_token_expires_at=expires_at
        )

    def consume_reset_token(self, token_hash: str, password_hash: str) -> Optional[User]:
        with self._lock:
            user = self._match_reset_token(token_hash)
            if user is None:
                return None
            updated = replace(
                user,
                password_hash=password_hash,
                reset_token_hash=None,
                reset_token_expires_at=None,
            )
            self._users[user.id] = updated
            return updated
