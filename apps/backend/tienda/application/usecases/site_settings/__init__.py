"""
Site settings use cases.
"""

from .manage_settings import (
    GetAllSettingsUseCase,
    GetSettingUseCase,
    PutSettingUseCase,
    ResetSettingUseCase,
)
from .settings_results import (
    SettingListResult,
    SettingResult,
    SettingsError,
    SettingsErrorCode,
    SettingView,
)

__all__ = [
    "GetAllSettingsUseCase",
    "GetSettingUseCase",
    "PutSettingUseCase",
    "ResetSettingUseCase",
    "SettingListResult",
    "SettingResult",
    "SettingView",
    "SettingsError",
    "SettingsErrorCode",
]
