"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepository

Responsibilities:
  - Resolver el pool (inyectado en tests o global en runtime).
  - Ejecutar SQL parametrizado con manejo de errores consistente.
  - Traducir UniqueViolation -> DuplicateKeyError (la app decide qué hacer).
  - Envolver cualquier otro fallo en DatabaseError con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool
  - infrastructure.db.pool.get_pool
  - crosscutting.exceptions.DatabaseError / DuplicateKeyError
  - crosscutting.logger.logger

Constraints:
  - Queries siempre parametrizadas (nunca interpolar input de usuario).
  - Un statement = una transacción implícita (commit al salir del context).
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional

from psycopg.errors import UniqueViolation
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateKeyError
from ....crosscutting.logger import logger


def like_pattern(text: str) -> str:
    """Patrón ILIKE '%texto%' con comodines escapados."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PostgresRepository:
    """R: Base de los repositorios PostgreSQL (helpers DRY)."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Pool inyectable para tests; en producción se obtiene por factory global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _run(
        self,
        *,
        query: str,
        params: Iterable[object],
        context_msg: str,
        extra: dict,
        fetch: str,
    ):
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                cursor = conn.execute(query, tuple(params))
                if fetch == "one":
                    return cursor.fetchone()
                if fetch == "all":
                    return cursor.fetchall()
                return cursor.rowcount
        except UniqueViolation as exc:
            constraint = getattr(exc.diag, "constraint_name", None) or ""
            logger.warning(
                context_msg,
                extra={**extra, "constraint": constraint, "error": "unique_violation"},
            )
            raise DuplicateKeyError(
                f"{context_msg}: duplicate key", key=constraint, original_error=exc
            ) from exc
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        return self._run(
            query=query, params=params, context_msg=context_msg, extra=extra, fetch="one"
        )

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        return self._run(
            query=query, params=params, context_msg=context_msg, extra=extra, fetch="all"
        )

    def _execute(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> int:
        """Ejecuta sin resultados; retorna filas afectadas."""
        return self._run(
            query=query,
            params=params,
            context_msg=context_msg,
            extra=extra,
            fetch="none",
        )
