"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, no .env file)
  - Reset cached settings and container singletons per test
  - Provide reusable users / repositories / HTTP client fixtures

Collaborators:
  - pytest: Test framework
  - tienda.container: in-memory repositories when APP_ENV=test
  - fastapi.testclient.TestClient

Notes:
  - Fixtures are auto-discovered by pytest
  - Use @pytest.fixture(scope="function") for per-test isolation
"""

import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ["APP_ENV"] = "test"

from tienda.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from tienda.container import get_user_repository, reset_container  # noqa: E402
from tienda.identity.auth_users import create_access_token  # noqa: E402
from tienda.identity.passwords import hash_password  # noqa: E402
from tienda.identity.users import User, UserRole  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require PostgreSQL)"
    )


@pytest.fixture(autouse=True)
def _isolated_container():
    """R: Settings y singletons frescos en cada test (repos in-memory vacíos)."""
    app_config.get_settings.cache_clear()
    reset_container()
    yield
    app_config.get_settings.cache_clear()
    reset_container()


# ============================================================================
# Users
# ============================================================================


def _create_user(
    role: UserRole = UserRole.USER,
    *,
    email: str | None = None,
    password: str = "secret123",
    name: str | None = "Cliente",
) -> User:
    """R: Crea y persiste un usuario en el repositorio del container."""
    return get_user_repository().create_user(
        email=email or f"{role.value}-{uuid4().hex[:8]}@example.com",
        password_hash=hash_password(password),
        role=role,
        name=name,
    )


def _bearer(user: User) -> dict[str, str]:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user():
    """R: Factory de usuarios persistidos (rol, email, password)."""
    return _create_user


@pytest.fixture
def auth_headers():
    """R: Headers Bearer para un usuario dado."""
    return _bearer


@pytest.fixture
def customer() -> User:
    return _create_user(UserRole.USER, email="cliente@example.com")


@pytest.fixture
def admin() -> User:
    return _create_user(UserRole.ADMIN, email="admin@example.com", name="Admin")


@pytest.fixture
def developer() -> User:
    return _create_user(UserRole.DEVELOPER, email="dev@example.com", name="Dev")


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def client():
    """R: TestClient sobre la app real (lifespan incluido, sin pool en test)."""
    from fastapi.testclient import TestClient

    from tienda.api.main import app

    with TestClient(app) as test_client:
        yield test_client
