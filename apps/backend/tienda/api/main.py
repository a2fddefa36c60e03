"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, security headers, request context, CORS)
  - Mount auth, users and store routers under the /api prefix
  - Expose health and readiness endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: catalog, settings, payments, ledger, orders

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - Health check validates DB only (doesn't call payment/email providers)

Notes:
  - Middleware order matters: RequestContext → SecurityHeaders → BodyLimit → routes
  - APP_ENV=test runs on in-memory repositories (no pool is opened)
"""

import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.dev_seed_admin import ensure_dev_admin
from ..container import get_user_repository
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..identity.passwords import hash_password
from ..infrastructure.db.pool import close_pool, init_pool, ping
from ..interfaces.api.http.router import router
from .admin_routes import router as users_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers

API_PREFIX = "/api"

_started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes pool and optional dev seed."""
    settings = get_settings()

    if not settings.is_test():
        # Initialize DB pool (must happen before any repository usage)
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        try:
            ensure_dev_admin(
                settings,
                user_repo=get_user_repository(),
                password_hasher=hash_password,
                env=os.environ,
            )
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise

        logger.info(
            "Tienda API starting up",
            extra={
                "environment": settings.app_env,
                "fake_payments": settings.fake_payments,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        if not settings.is_test():
            close_pool()
        logger.info("Tienda API shutting down")


_settings = get_settings()

# R: Create FastAPI application instance with API metadata
app = FastAPI(
    title="Tienda API",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Registro, login y cuenta (JWT Bearer)"},
        {"name": "users", "description": "Panel de usuarios (admin | developer)"},
        {"name": "products", "description": "Catálogo (lectura pública)"},
        {"name": "settings", "description": "Configuración del sitio"},
        {"name": "payments", "description": "Sesiones de pago y webhook del proveedor"},
        {"name": "transactions", "description": "Ledger de transacciones"},
        {"name": "orders", "description": "Pedidos de fulfillment"},
    ],
)

# R: Middleware order (bottom = first to execute):
# 1. CORSMiddleware - handles preflight
# 2. RequestContextMiddleware - sets request_id
# 3. SecurityHeadersMiddleware - X-Content-Type-Options, X-Frame-Options, CSP
# 4. BodyLimitMiddleware - rejects oversized bodies early
app.add_middleware(BodyLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.get_allowed_origins_list(),
    allow_credentials=_settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Request-Id",
        "X-Signature",
    ],
)

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(router, prefix=API_PREFIX)

register_exception_handlers(app)


def _database_status() -> str:
    settings = get_settings()
    if settings.is_test():
        # In-memory repositories: always available.
        return "connected"
    return "connected" if ping() else "disconnected"


@app.get(f"{API_PREFIX}/health", tags=["health"])
def health(request: Request):
    """
    R: Health check for monitoring/orchestration.

    Returns:
        status: always "ok" while the process serves requests
        database: "connected" or "disconnected"
        uptime: seconds since the module was loaded
    """
    settings = get_settings()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "database": _database_status(),
        "environment": settings.app_env,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/readyz", tags=["health"])
def readyz(request: Request):
    """R: Minimal readiness check for core dependencies only."""
    db_status = _database_status()
    return {
        "ok": db_status == "connected",
        "db": db_status,
        "request_id": getattr(request.state, "request_id", None),
    }
