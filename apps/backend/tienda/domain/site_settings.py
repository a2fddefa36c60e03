"""
===============================================================================
TARJETA CRC — domain/site_settings.py
===============================================================================

Módulo:
    Catálogo cerrado de settings del sitio (clave -> schema tipado + default)

Responsabilidades:
    - Enumerar las claves conocidas (SettingKey).
    - Definir el schema de cada clave (pydantic) y su valor por defecto.
    - Completar valores parciales con los defaults (merge).

Colaboradores:
    - application.usecases.site_settings: get/put/reset.
    - domain.entities.SettingRecord: fila persistida.

Reglas:
    - Claves fuera del catálogo -> ValidationError en el caso de uso.
    - Campos desconocidos dentro de un valor se ignoran.
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict


class SettingKey(str, Enum):
    SITE_COLORS = "siteColors"
    BANNERS = "banners"


class SiteColors(BaseModel):
    model_config = ConfigDict(extra="ignore")

    primaryColor: str = "#f5a938"
    primaryHover: str = "#e08c1b"
    bodyBg: str = "#f8f9fb"
    headerGradientStart: str = "#eec17e"
    headerGradientEnd: str = "#f8f9fb"
    footerBg: str = "rgba(221, 178, 138, 0.36)"
    accentBg: str = "rgba(221, 178, 138, 0.36)"


class Banners(BaseModel):
    model_config = ConfigDict(extra="ignore")

    natura: str = "/assets/img/bannernatura.png"
    avon: str = "/assets/img/banneravon.png"
    arbell: str = "/assets/img/bannerarbell.png"


SETTING_SCHEMAS: Mapping[SettingKey, type[BaseModel]] = {
    SettingKey.SITE_COLORS: SiteColors,
    SettingKey.BANNERS: Banners,
}


def parse_setting_key(raw: str) -> SettingKey | None:
    """None si la clave no pertenece al catálogo."""
    try:
        return SettingKey(raw)
    except ValueError:
        return None


def default_value(key: SettingKey) -> dict[str, Any]:
    return SETTING_SCHEMAS[key]().model_dump()


def merge_with_defaults(key: SettingKey, value: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Valida un valor (posiblemente parcial) contra el schema de la clave.

    Lanza pydantic.ValidationError si algún campo tiene tipo inválido.
    """
    schema = SETTING_SCHEMAS[key]
    return schema.model_validate(dict(value or {})).model_dump()
