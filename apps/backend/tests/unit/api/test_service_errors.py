"""
Name: Service Error Mapping Tests

Responsibilities:
  - DatabaseError -> 503 DATABASE_ERROR; missing pool -> 503 SERVICE_UNAVAILABLE
  - PaymentGatewayError -> 502 PAYMENT_GATEWAY_ERROR
  - Internal messages stay in logs; responses carry error_id only
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from tienda.api.exception_handlers import register_exception_handlers
from tienda.crosscutting.exceptions import (
    DatabaseError,
    EmailDeliveryError,
    PaymentGatewayError,
)
from tienda.infrastructure.db import PoolNotInitializedError

pytestmark = pytest.mark.unit


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/query-failed")
    def query_failed():
        raise DatabaseError(
            "PostgresUserRepository: get_user_by_id failed: relation users",
            error_id="err-1",
        )

    @app.get("/no-pool")
    def no_pool():
        raise DatabaseError(
            "PostgresUserRepository: get_user_by_id failed",
            original_error=PoolNotInitializedError("sin pool"),
        )

    @app.get("/gateway")
    def gateway():
        raise PaymentGatewayError("provider returned 500: secret-key-rejected")

    @app.get("/email")
    def email():
        raise EmailDeliveryError("smtp down")

    return app


class TestServiceErrors:
    def test_database_error_hides_internal_message(self):
        response = TestClient(_build_app()).get("/query-failed")

        body = response.json()
        assert response.status_code == 503
        assert body["code"] == "DATABASE_ERROR"
        assert "relation users" not in body["detail"]
        assert any(e.get("error_id") == "err-1" for e in body["errors"])
        assert response.headers["content-type"].startswith("application/problem+json")

    def test_missing_pool_is_service_unavailable(self):
        response = TestClient(_build_app()).get("/no-pool")

        assert response.status_code == 503
        assert response.json()["code"] == "SERVICE_UNAVAILABLE"

    def test_payment_gateway_error(self):
        response = TestClient(_build_app()).get("/gateway")

        body = response.json()
        assert response.status_code == 502
        assert body["code"] == "PAYMENT_GATEWAY_ERROR"
        assert "secret-key" not in body["detail"]

    def test_email_delivery_error(self):
        response = TestClient(_build_app()).get("/email")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
