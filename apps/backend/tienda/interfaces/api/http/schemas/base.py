"""
Base de DTOs HTTP: JSON en camelCase (contrato del frontend), aceptando
también snake_case en requests.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
