"""
Name: Backend ASGI Entrypoint (tienda.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep this module side-effect free beyond importing tienda.api.main

Notes/Constraints:
  - ASGI servers are configured to import tienda.main:app
  - Use this module only as an entrypoint, not for business logic
"""

from tienda.api.main import app

__all__ = ["app"]
