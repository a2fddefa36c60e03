"""
Name: Store HTTP Tests (catalog, payments, ledger, orders, settings, health)

Responsibilities:
  - Public catalog reads vs. staff-only writes
  - Payment session creation and webhook idempotence over HTTP
  - Ledger admin endpoints and "my orders" ownership
  - Fulfillment orders and site settings capability gates
  - Health / readiness payloads
"""

import asyncio
import hashlib
import hmac
import json

import pytest
from tienda.container import (
    get_record_webhook_use_case,
    get_transaction_repository,
    reset_container,
)
from tienda.crosscutting.config import get_settings

pytestmark = pytest.mark.unit


def _product(client, headers, **overrides):
    payload = {
        "name": "Kaiak",
        "price": 1500,
        "image": "/img/kaiak.png",
        "brand": "natura",
        "category": "perfumeria",
    }
    payload.update(overrides)
    return client.post("/api/products", headers=headers, json=payload)


def _webhook(client, payment_id="P1", status="approved", **extra):
    event = {
        "payment_id": payment_id,
        "status": status,
        "items": [{"title": "Perfume", "unit_price": 10, "quantity": 2}],
        "payer": {"email": "cliente@example.com"},
    }
    event.update(extra)
    return client.post("/api/payments/webhook", json=event)


class TestCatalog:
    def test_public_list_and_admin_create(self, client, admin, auth_headers):
        created = _product(client, auth_headers(admin))
        listed = client.get("/api/products")
        fetched = client.get(f"/api/products/{created.json()['id']}")

        assert created.status_code == 201
        assert created.json()["brand"] == "natura"
        assert [p["name"] for p in listed.json()] == ["Kaiak"]
        assert fetched.status_code == 200

    def test_customer_cannot_create(self, client, customer, auth_headers):
        response = _product(client, auth_headers(customer))

        assert response.status_code == 403

    def test_anonymous_cannot_create(self, client):
        assert _product(client, {}).status_code == 401

    def test_invalid_brand_is_422(self, client, admin, auth_headers):
        response = _product(client, auth_headers(admin), brand="revlon")

        assert response.status_code == 422

    def test_search_and_brand_filter(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        _product(client, headers, name="Kaiak", brand="natura")
        _product(client, headers, name="Far Away", brand="avon")

        search = client.get("/api/products/search", params={"q": "far"})
        by_brand = client.get("/api/products", params={"brand": "natura"})

        assert [p["name"] for p in search.json()] == ["Far Away"]
        assert [p["name"] for p in by_brand.json()] == ["Kaiak"]

    def test_update_and_delete(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        product_id = _product(client, headers).json()["id"]

        updated = client.put(f"/api/products/{product_id}", headers=headers, json={"price": 99})
        deleted = client.delete(f"/api/products/{product_id}", headers=headers)
        missing = client.get(f"/api/products/{product_id}")

        assert updated.json()["price"] == 99
        assert deleted.json()["id"] == product_id
        assert missing.status_code == 404


class TestPayments:
    def test_create_payment_session(self, client):
        response = client.post(
            "/api/payments/create",
            json={"items": [{"title": "Kaiak", "unit_price": 1500, "quantity": 1}]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["payment_id"].startswith("FAKE_")
        assert body["payment_id"] in body["payment_url"]

    def test_create_payment_requires_items(self, client):
        response = client.post("/api/payments/create", json={"items": []})

        assert response.status_code == 422

    def test_webhook_create_then_transition(self, client):
        first = _webhook(client, status="approved")
        again = _webhook(client, status="approved")
        changed = _webhook(client, status="rejected")

        assert first.status_code == again.status_code == changed.status_code == 200
        assert first.json() == {"received": True}
        tx = get_transaction_repository().find_by_external_id("P1")
        assert tx.amount == 20
        assert tx.status.value == "rejected"
        assert len(tx.status_history) == 2

    def test_webhook_unknown_status_is_acked_and_ignored(self, client):
        response = _webhook(client, status="chargeback")

        assert response.status_code == 200
        assert get_transaction_repository().find_by_external_id("P1") is None

    def test_webhook_malformed_json_is_acked(self, client):
        response = client.post(
            "/api/payments/webhook",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200

    def test_webhook_signature_enforced_when_secret_set(self, client, monkeypatch):
        monkeypatch.setenv("PAYMENT_WEBHOOK_SECRET", "whsec")
        get_settings.cache_clear()
        reset_container()
        body = json.dumps({"payment_id": "P9", "status": "approved"}).encode()
        signature = hmac.new(b"whsec", body, hashlib.sha256).hexdigest()

        unsigned = client.post("/api/payments/webhook", content=body)
        signed = client.post(
            "/api/payments/webhook", content=body, headers={"X-Signature": signature}
        )

        assert unsigned.status_code == 401
        assert signed.status_code == 200
        assert get_transaction_repository().find_by_external_id("P9") is not None

    def test_webhook_runs_off_the_event_loop(self, client):
        from tienda.api.main import app

        seen = []

        class RecordingUseCase:
            def execute(self, event):
                try:
                    asyncio.get_running_loop()
                    seen.append("event-loop")
                except RuntimeError:
                    seen.append("worker-thread")

        app.dependency_overrides[get_record_webhook_use_case] = RecordingUseCase
        try:
            response = _webhook(client)
        finally:
            app.dependency_overrides.pop(get_record_webhook_use_case, None)

        assert response.status_code == 200
        assert seen == ["worker-thread"]

    def test_create_test_order_requires_login(self, client):
        assert client.post("/api/payments/create-test-order").status_code == 401

    def test_create_test_order(self, client, customer, auth_headers):
        response = client.post(
            "/api/payments/create-test-order", headers=auth_headers(customer)
        )

        assert response.status_code == 201
        tx = response.json()["transaction"]
        assert tx["status"] == "approved"
        assert tx["amount"] == 250
        assert tx["customerInfo"]["email"] == customer.email


class TestLedger:
    def test_admin_reads_and_transitions(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        _webhook(client, status="pending")
        tx_id = str(get_transaction_repository().find_by_external_id("P1").id)

        page = client.get("/api/transactions", headers=headers, params={"status": "pending"})
        updated = client.put(
            f"/api/transactions/{tx_id}/status",
            headers=headers,
            json={"status": "approved", "note": "acreditado"},
        )

        assert page.json()["pagination"]["total"] == 1
        assert page.json()["pagination"]["hasMore"] is False
        assert updated.status_code == 200
        history = updated.json()["transaction"]["statusHistory"]
        assert [h["status"] for h in history] == ["pending", "approved"]
        assert history[-1]["changedBy"] == str(admin.id)

    def test_invalid_status_is_422(self, client, admin, auth_headers):
        _webhook(client)
        tx_id = str(get_transaction_repository().find_by_external_id("P1").id)

        response = client.put(
            f"/api/transactions/{tx_id}/status",
            headers=auth_headers(admin),
            json={"status": "paid"},
        )

        assert response.status_code == 422
        assert len(get_transaction_repository().find_by_external_id("P1").status_history) == 1

    def test_shipping_and_notes(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        _webhook(client)
        tx_id = str(get_transaction_repository().find_by_external_id("P1").id)

        shipping = client.put(
            f"/api/transactions/{tx_id}/shipping",
            headers=headers,
            json={"shippingStatus": "dispatched", "trackingNumber": "AR1"},
        )
        notes = client.put(
            f"/api/transactions/{tx_id}/notes", headers=headers, json={"notes": "frágil"}
        )

        assert shipping.json()["transaction"]["shippingStatus"] == "dispatched"
        assert notes.json()["transaction"]["notes"] == "frágil"

    def test_stats(self, client, admin, auth_headers):
        _webhook(client, "P1", "approved")
        _webhook(client, "P2", "rejected")

        stats = client.get("/api/transactions/stats", headers=auth_headers(admin)).json()

        assert stats["total"] == {"transactions": 2, "amount": 40}
        assert stats["approved"]["transactions"] == 1
        assert stats["byStatus"]["refunded"] == {"count": 0, "amount": 0}

    def test_date_only_filters(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        _webhook(client, "P1", "approved")

        page = client.get(
            "/api/transactions",
            headers=headers,
            params={"startDate": "2020-01-01", "endDate": "2999-01-01"},
        )
        stats = client.get(
            "/api/transactions/stats", headers=headers, params={"startDate": "2020-01-01"}
        )
        orders = client.get("/api/orders", headers=headers, params={"startDate": "2020-01-01"})

        assert page.status_code == 200
        assert page.json()["pagination"]["total"] == 1
        assert stats.json()["total"]["transactions"] == 1
        assert orders.status_code == 200

    def test_customer_cannot_read_ledger(self, client, customer, auth_headers):
        response = client.get("/api/transactions", headers=auth_headers(customer))

        assert response.status_code == 403

    def test_my_orders_by_contact_email(self, client, customer, auth_headers):
        _webhook(client, "P1", payer={"email": customer.email})
        _webhook(client, "P2", payer={"email": "otro@example.com"})
        headers = auth_headers(customer)

        mine = client.get("/api/transactions/my-orders", headers=headers).json()
        foreign = get_transaction_repository().find_by_external_id("P2")
        forbidden = client.get(f"/api/transactions/my-orders/{foreign.id}", headers=headers)

        assert [o["transactionId"] for o in mine["orders"]] == ["P1"]
        assert mine["stats"]["total"] == 1
        assert "webhookData" not in mine["orders"][0] or mine["orders"][0]["webhookData"] is None
        assert forbidden.status_code == 403


class TestOrders:
    def _create(self, client, headers):
        return client.post(
            "/api/orders",
            headers=headers,
            json={
                "items": [
                    {"productId": "p1", "name": "Kaiak", "brand": "natura", "price": 100, "quantity": 2}
                ],
                "paymentId": "PAY-1",
                "paymentStatus": "approved",
            },
        )

    def test_customer_creates_admin_manages(self, client, customer, admin, auth_headers):
        created = self._create(client, auth_headers(customer))
        order_id = created.json()["id"]
        staff = auth_headers(admin)

        updated = client.put(
            f"/api/orders/{order_id}/status", headers=staff, json={"status": "shipped"}
        )
        stats = client.get("/api/orders/stats", headers=staff).json()

        assert created.status_code == 201
        assert created.json()["total"] == 200
        assert updated.json()["status"] == "shipped"
        assert stats["totalOrders"] == 1
        assert stats["topProducts"][0]["productId"] == "p1"

    def test_customer_cannot_list_orders(self, client, customer, auth_headers):
        assert client.get("/api/orders", headers=auth_headers(customer)).status_code == 403


class TestSettings:
    def test_public_read_returns_defaults(self, client):
        response = client.get("/api/settings/siteColors")

        assert response.status_code == 200
        assert response.json()["isDefault"] is True

    def test_developer_updates_admin_forbidden(self, client, developer, admin, auth_headers):
        denied = client.put(
            "/api/settings/siteColors",
            headers=auth_headers(admin),
            json={"value": {"primaryColor": "#000"}},
        )
        saved = client.put(
            "/api/settings/siteColors",
            headers=auth_headers(developer),
            json={"value": {"primaryColor": "#000"}},
        )
        read = client.get("/api/settings/siteColors").json()

        assert denied.status_code == 403
        assert saved.status_code == 200
        assert read["value"]["primaryColor"] == "#000"
        assert read["isDefault"] is False

    def test_reset(self, client, developer, auth_headers):
        headers = auth_headers(developer)
        client.put("/api/settings/banners", headers=headers, json={"value": {"avon": "/a.png"}})

        reset = client.post("/api/settings/reset/banners", headers=headers)

        assert reset.json()["isDefault"] is True

    def test_unknown_key_is_422(self, client):
        assert client.get("/api/settings/fonts").status_code == 422


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert body["environment"] == "test"
        assert response.headers["X-Request-Id"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_readyz(self, client):
        assert client.get("/readyz").json()["ok"] is True
