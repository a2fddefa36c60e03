"""
===============================================================================
TARJETA CRC — tienda/interfaces/api/http/routers/settings.py
===============================================================================

Responsibilities:
    - Lectura pública de la configuración del sitio (con defaults).
    - Escritura y reset restringidos a SETTINGS_MANAGE (developer).

Collaborators:
    - tienda.application.usecases.site_settings
    - tienda.identity.auth_users.require_capability
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tienda.application.usecases.site_settings import (
    GetAllSettingsUseCase,
    GetSettingUseCase,
    PutSettingUseCase,
    ResetSettingUseCase,
    SettingView,
)
from tienda.container import (
    get_get_all_settings_use_case,
    get_get_setting_use_case,
    get_put_setting_use_case,
    get_reset_setting_use_case,
)
from tienda.identity.auth_users import require_capability
from tienda.identity.capabilities import Capability
from tienda.identity.users import User

from ..error_mapping import raise_settings_error
from ..schemas.settings import PutSettingReq, SettingRes, SettingsListRes

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_setting_res(view: SettingView) -> SettingRes:
    return SettingRes(
        key=view.key,
        value=view.value,
        is_default=view.is_default,
        updated_by=view.updated_by,
        updated_at=view.updated_at,
    )


@router.get("", response_model=SettingsListRes)
def get_all_settings(
    use_case: GetAllSettingsUseCase = Depends(get_get_all_settings_use_case),
):
    result = use_case.execute()
    return SettingsListRes(settings=[_to_setting_res(v) for v in result.settings])


@router.get("/{key}", response_model=SettingRes)
def get_setting(
    key: str,
    use_case: GetSettingUseCase = Depends(get_get_setting_use_case),
):
    result = use_case.execute(key)
    if result.error is not None:
        raise_settings_error(result.error)
    return _to_setting_res(result.setting)


@router.put("/{key}", response_model=SettingRes)
def put_setting(
    key: str,
    req: PutSettingReq,
    use_case: PutSettingUseCase = Depends(get_put_setting_use_case),
    user: User = Depends(require_capability(Capability.SETTINGS_MANAGE)),
):
    result = use_case.execute(key, req.value, actor_id=user.id)
    if result.error is not None:
        raise_settings_error(result.error)
    return _to_setting_res(result.setting)


@router.post("/reset/{key}", response_model=SettingRes)
def reset_setting(
    key: str,
    use_case: ResetSettingUseCase = Depends(get_reset_setting_use_case),
    _user: User = Depends(require_capability(Capability.SETTINGS_MANAGE)),
):
    result = use_case.execute(key)
    if result.error is not None:
        raise_settings_error(result.error)
    return _to_setting_res(result.setting)
