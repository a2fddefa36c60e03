"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Criptografía de credenciales (Argon2 + tokens de recuperación)

Responsabilidades:
    - Hashear/verificar passwords (Argon2, salteado, irreversible).
    - Generar tokens de recuperación de alta entropía.
    - Derivar el hash one-way (sha256) que se persiste en lugar del token.

Colaboradores:
    - application.usecases.auth: registro, login, cambio y reseteo de password.
    - application.dev_seed_admin: alta de la cuenta privilegiada de desarrollo.

Notas:
    - El token de recuperación viaja solo por email; en DB vive su sha256.
===============================================================================
"""

from __future__ import annotations

import hashlib
import secrets

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

MIN_PASSWORD_LENGTH: int = 6

# 32 bytes -> 64 caracteres hex
RESET_TOKEN_BYTES: int = 32

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hashea un password usando Argon2."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verifica password vs hash almacenado."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def is_acceptable_password(password: str | None) -> bool:
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def generate_reset_token() -> str:
    """Token aleatorio que se envía (sin hashear) al email del usuario."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
