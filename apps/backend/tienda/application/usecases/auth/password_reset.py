"""
===============================================================================
USE CASES: Password Reset (solicitud + consumo de token)
===============================================================================

Flujo:
  1) RequestPasswordResetUseCase
     - Email desconocido -> mensaje genérico (no revela existencia).
     - Genera token aleatorio, guarda SOLO su sha256 con vencimiento.
     - Envía el link por email; si el envío falla, limpia el token y
       devuelve INTERNAL_ERROR.
  2) ConsumePasswordResetUseCase
     - Busca por hash del token con vencimiento > ahora.
     - Inexistente o vencido -> INVALID_TOKEN.
     - Guarda el nuevo hash y limpia el token en una sola escritura
       condicional (uso único, también ante consumos concurrentes).

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Collaborators:
    - UserRepository: get_user_by_email, get_user_by_reset_token,
      set_reset_token, consume_reset_token
    - EmailSender: send(to, subject, html)
    - identity.passwords: generate_reset_token, hash_reset_token, hash_password
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from html import escape

from ....crosscutting.exceptions import EmailDeliveryError
from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....domain.services import EmailSender
from ....identity.passwords import (
    MIN_PASSWORD_LENGTH,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    is_acceptable_password,
)
from .auth_results import AuthError, AuthErrorCode, AuthResult, MessageResult
from .register_user import normalize_email

RESET_REQUESTED_MESSAGE = (
    "Si el email existe, recibirás un enlace para restablecer tu contraseña."
)
RESET_PATH = "/pages/reset-password.html"


@dataclass(frozen=True)
class RequestPasswordResetInput:
    email: str


@dataclass(frozen=True)
class ConsumePasswordResetInput:
    token: str
    new_password: str


def build_reset_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}{RESET_PATH}?token={token}"


def _reset_email_html(name: str | None, link: str, ttl_minutes: int) -> str:
    hours = max(1, ttl_minutes // 60)
    greeting = f"Hola {escape(name)}," if name else "Hola,"
    return (
        f"<p>{greeting}</p>"
        "<p>Recibimos un pedido para restablecer tu contraseña.</p>"
        f'<p><a href="{escape(link)}">Restablecer contraseña</a></p>'
        f"<p>El enlace vence en {hours} hora(s). Si no lo pediste, ignorá este email.</p>"
    )


class RequestPasswordResetUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        email_sender: EmailSender,
        *,
        frontend_url: str,
        ttl_minutes: int = 120,
    ) -> None:
        self._users = user_repository
        self._email = email_sender
        self._frontend_url = frontend_url
        self._ttl = timedelta(minutes=ttl_minutes)
        self._ttl_minutes = ttl_minutes

    def execute(self, input_data: RequestPasswordResetInput) -> MessageResult:
        email = normalize_email(input_data.email)
        if not email:
            return MessageResult(
                error=AuthError(AuthErrorCode.VALIDATION_ERROR, "El email es obligatorio.")
            )

        user = self._users.get_user_by_email(email)
        if user is None:
            return MessageResult(message=RESET_REQUESTED_MESSAGE)

        token = generate_reset_token()
        expires_at = datetime.now(timezone.utc) + self._ttl
        self._users.set_reset_token(user.id, hash_reset_token(token), expires_at)

        link = build_reset_link(self._frontend_url, token)
        try:
            self._email.send(
                to=user.email,
                subject="Restablecer contraseña",
                html=_reset_email_html(user.name, link, self._ttl_minutes),
            )
        except EmailDeliveryError as exc:
            # R: sin email entregado el token no debe quedar vivo.
            self._users.set_reset_token(user.id, None, None)
            logger.error(
                "Password reset email failed",
                extra={"user_id": str(user.id), "error": str(exc)},
            )
            return MessageResult(
                error=AuthError(
                    AuthErrorCode.INTERNAL_ERROR,
                    "No se pudo enviar el email de recuperación.",
                )
            )

        logger.info("Password reset requested", extra={"user_id": str(user.id)})
        return MessageResult(message=RESET_REQUESTED_MESSAGE)


class ConsumePasswordResetUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: ConsumePasswordResetInput) -> AuthResult:
        if not input_data.token or not input_data.new_password:
            return self._validation_error("Token y nueva contraseña son obligatorios.")

        if not is_acceptable_password(input_data.new_password):
            return self._validation_error(
                f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres."
            )

        token_hash = hash_reset_token(input_data.token)
        # R: rechazo barato antes de hashear con argon2.
        if self._users.get_user_by_reset_token(token_hash) is None:
            return self._invalid_token()

        user = self._users.consume_reset_token(
            token_hash, hash_password(input_data.new_password)
        )
        if user is None:
            return self._invalid_token()

        logger.info("Password reset completed", extra={"user_id": str(user.id)})
        return AuthResult(user=user)

    @staticmethod
    def _invalid_token() -> AuthResult:
        return AuthResult(
            error=AuthError(AuthErrorCode.INVALID_TOKEN, "Token inválido o vencido.")
        )

    @staticmethod
    def _validation_error(message: str) -> AuthResult:
        return AuthResult(error=AuthError(AuthErrorCode.VALIDATION_ERROR, message))
