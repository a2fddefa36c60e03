"""
SITE SETTINGS USE CASE RESULTS

SettingView es la proyección que ve el cliente: clave, valor efectivo
(almacenado o default) e isDefault.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List
from uuid import UUID


class SettingsErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass(frozen=True)
class SettingsError:
    code: SettingsErrorCode
    message: str


@dataclass(frozen=True)
class SettingView:
    key: str
    value: dict[str, Any]
    is_default: bool
    updated_by: UUID | None = None
    updated_at: datetime | None = None


@dataclass
class SettingResult:
    setting: SettingView | None = None
    error: SettingsError | None = None


@dataclass
class SettingListResult:
    settings: List[SettingView] = field(default_factory=list)
    error: SettingsError | None = None
