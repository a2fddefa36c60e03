"""
===============================================================================
USE CASES: Site Settings (get / get all / put / reset)
===============================================================================

Business Goal:
    Configuración global del sitio (colores, banners) editable por developers.

Reglas:
    - Solo claves del catálogo cerrado SettingKey; otra clave -> VALIDATION_ERROR.
    - Lectura: si no hay fila almacenada, se devuelve el default (isDefault=True).
    - Escritura (upsert): el valor puede ser parcial; los campos faltantes se
      completan con defaults y los tipos se validan con el schema pydantic.
    - Reset: borra la fila; la próxima lectura vuelve al default.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Collaborators:
    - SettingRepository: get, upsert, delete
    - domain.site_settings: parse_setting_key, default_value, merge_with_defaults
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from pydantic import ValidationError

from ....domain.entities import SettingRecord
from ....domain.ledger import utcnow
from ....domain.repositories import SettingRepository
from ....domain.site_settings import (
    SettingKey,
    default_value,
    merge_with_defaults,
    parse_setting_key,
)
from .settings_results import (
    SettingListResult,
    SettingResult,
    SettingsError,
    SettingsErrorCode,
    SettingView,
)


def _unknown_key(raw: str) -> SettingResult:
    allowed = ", ".join(k.value for k in SettingKey)
    return SettingResult(
        error=SettingsError(
            SettingsErrorCode.VALIDATION_ERROR,
            f"Clave de configuración desconocida '{raw}'. Claves válidas: {allowed}",
        )
    )


def _view(key: SettingKey, record: SettingRecord | None) -> SettingView:
    if record is None:
        return SettingView(key=key.value, value=default_value(key), is_default=True)
    return SettingView(
        key=key.value,
        value=merge_with_defaults(key, record.value),
        is_default=False,
        updated_by=record.updated_by,
        updated_at=record.updated_at,
    )


class GetSettingUseCase:
    def __init__(self, setting_repository: SettingRepository) -> None:
        self._settings = setting_repository

    def execute(self, raw_key: str) -> SettingResult:
        key = parse_setting_key(raw_key)
        if key is None:
            return _unknown_key(raw_key)
        return SettingResult(setting=_view(key, self._settings.get(key.value)))


class GetAllSettingsUseCase:
    def __init__(self, setting_repository: SettingRepository) -> None:
        self._settings = setting_repository

    def execute(self) -> SettingListResult:
        return SettingListResult(
            settings=[_view(key, self._settings.get(key.value)) for key in SettingKey]
        )


class PutSettingUseCase:
    def __init__(self, setting_repository: SettingRepository) -> None:
        self._settings = setting_repository

    def execute(
        self, raw_key: str, value: Mapping[str, Any] | None, *, actor_id: UUID | None
    ) -> SettingResult:
        key = parse_setting_key(raw_key)
        if key is None:
            return _unknown_key(raw_key)
        if value is not None and not isinstance(value, Mapping):
            return SettingResult(
                error=SettingsError(
                    SettingsErrorCode.VALIDATION_ERROR, "El valor debe ser un objeto."
                )
            )

        try:
            merged = merge_with_defaults(key, value)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            return SettingResult(
                error=SettingsError(
                    SettingsErrorCode.VALIDATION_ERROR,
                    f"Valor inválido para '{key.value}': {fields}",
                )
            )

        stored = self._settings.upsert(
            SettingRecord(key=key.value, value=merged, updated_by=actor_id, updated_at=utcnow())
        )
        return SettingResult(setting=_view(key, stored))


class ResetSettingUseCase:
    def __init__(self, setting_repository: SettingRepository) -> None:
        self._settings = setting_repository

    def execute(self, raw_key: str) -> SettingResult:
        key = parse_setting_key(raw_key)
        if key is None:
            return _unknown_key(raw_key)
        self._settings.delete(key.value)
        return SettingResult(setting=_view(key, None))
