"""In-memory settings store (tests / CI)."""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, Optional

from ....domain.entities import SettingRecord
from ....domain.ledger import utcnow


class InMemorySettingRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._records: Dict[str, SettingRecord] = {}

    def get(self, key: str) -> Optional[SettingRecord]:
        with self._lock:
            record = self._records.get(key)
        return replace(record, value=dict(record.value)) if record else None

    def list_settings(self) -> list[SettingRecord]:
        with self._lock:
            return [self._records[k] for k in sorted(self._records)]

    def upsert(self, record: SettingRecord) -> SettingRecord:
        stored = replace(
            record, value=dict(record.value), updated_at=record.updated_at or utcnow()
        )
        with self._lock:
            self._records[record.key] = stored
        return stored

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._records.pop(key, None) is not None
