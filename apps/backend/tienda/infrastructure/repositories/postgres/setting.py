"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/setting.py
============================================================
Class: PostgresSettingRepository

Responsibilities:
  - Leer/escribir filas de `site_settings` (key PK, value JSONB).
  - Upsert atómico (INSERT ... ON CONFLICT DO UPDATE).
  - Borrar la fila para volver al default.

Collaborators:
  - postgres.base.PostgresRepository
  - domain.entities.SettingRecord
============================================================
"""

from __future__ import annotations

from typing import Optional

from psycopg.types.json import Jsonb

from ....domain.entities import SettingRecord
from ....domain.ledger import utcnow
from .base import PostgresRepository

_SETTING_COLUMNS = "key, value, updated_by, updated_at"


def _row_to_setting(row: tuple) -> SettingRecord:
    return SettingRecord(
        key=row[0], value=dict(row[1] or {}), updated_by=row[2], updated_at=row[3]
    )


class PostgresSettingRepository(PostgresRepository):
    def get(self, key: str) -> Optional[SettingRecord]:
        row = self._fetchone(
            query=f"SELECT {_SETTING_COLUMNS} FROM site_settings WHERE key = %s",
            params=(key,),
            context_msg="PostgresSettingRepository: get failed",
            extra={"key": key},
        )
        return _row_to_setting(row) if row else None

    def list_settings(self) -> list[SettingRecord]:
        rows = self._fetchall(
            query=f"SELECT {_SETTING_COLUMNS} FROM site_settings ORDER BY key",
            params=(),
            context_msg="PostgresSettingRepository: list failed",
            extra={},
        )
        return [_row_to_setting(r) for r in rows]

    def upsert(self, record: SettingRecord) -> SettingRecord:
        row = self._fetchone(
            query=f"""
                INSERT INTO site_settings (key, value, updated_by, updated_at)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (key) DO UPDATE
                SET value = EXCLUDED.value,
                    updated_by = EXCLUDED.updated_by,
                    updated_at = EXCLUDED.updated_at
                RETURNING {_SETTING_COLUMNS}
            """,
            params=(
                record.key,
                Jsonb(record.value),
                record.updated_by,
                record.updated_at or utcnow(),
            ),
            context_msg="PostgresSettingRepository: upsert failed",
            extra={"key": record.key},
        )
        return _row_to_setting(row)

    def delete(self, key: str) -> bool:
        affected = self._execute(
            query="DELETE FROM site_settings WHERE key = %s",
            params=(key,),
            context_msg="PostgresSettingRepository: delete failed",
            extra={"key": key},
        )
        return affected > 0
