"""
===============================================================================
APPLICATION LAYER
===============================================================================

Los casos de uso viven en `usecases/<feature>/` y devuelven resultados
tipados (sin lanzar excepciones por fallas de negocio).

Tareas de arranque:
  - dev_seed_admin.ensure_dev_admin: cuenta privilegiada para desarrollo/CI.
===============================================================================
"""

from .dev_seed_admin import ensure_dev_admin

__all__ = ["ensure_dev_admin"]
