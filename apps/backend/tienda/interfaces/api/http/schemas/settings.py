"""Schemas HTTP de configuración del sitio."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from .base import CamelModel


class PutSettingReq(CamelModel):
    value: Any = None


class SettingRes(CamelModel):
    key: str
    value: dict[str, Any]
    is_default: bool
    updated_by: UUID | None = None
    updated_at: datetime | None = None


class SettingsListRes(CamelModel):
    settings: list[SettingRes]
