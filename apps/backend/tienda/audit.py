"""
===============================================================================
TARJETA CRC — tienda/audit.py (Emisión de auditoría)
===============================================================================

Responsabilidades:
  - Construir líneas de auditoría con formato consistente (actor/action/target).
  - Emitirlas por el logger estructurado con prefijo [AUDIT].
  - “Best-effort”: si algo falla al emitir, NO rompe el flujo de negocio.

Colaboradores:
  - tienda.crosscutting.logger.logger
  - application.usecases.auth (cambios de rol, reseteo de password por admin)

Decisiones:
  - La auditoría es solo log (no hay tabla): garantía más débil que el
    historial de transacciones.
  - Metadata se sanitiza a valores serializables; lo no serializable se stringifica.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from .crosscutting.logger import logger

AUDIT_PREFIX = "[AUDIT]"


def _sanitize(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, dict):
        return {str(k): _sanitize(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [_sanitize(v) for v in value]

    return str(value)


def format_role_change(actor: str, target: str, previous: str, new: str) -> str:
    return f"{AUDIT_PREFIX} {actor} changed role of {target} from {previous} to {new}"


def emit_audit_event(
    *,
    action: str,
    message: str,
    actor: str | None = None,
    target: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """
    Emite una línea de auditoría.

    Regla clave:
      - Nunca lanza excepción hacia el caller.
    """
    try:
        logger.info(
            message,
            extra={
                "audit_action": action,
                "audit_actor": actor or "anonymous",
                "audit_target": target,
                "audit_metadata": _sanitize(metadata or {}),
            },
        )
    except Exception as exc:  # pragma: no cover - el logging no debería fallar
        logger.warning("Audit emit failed", extra={"error": str(exc)})
