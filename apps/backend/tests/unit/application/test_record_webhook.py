"""
Name: Record Webhook Use Case Tests

Responsibilities:
  - Verify creation, transition and re-delivery outcomes
  - Verify unknown statuses and missing ids are ignored
  - Verify concurrent deliveries of one payment create a single transaction
  - Verify persistence failures are reported as FAILED (never raised)

Collaborators:
  - InMemoryTransactionRepository (same uniqueness guarantees as Postgres)
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier
from unittest.mock import Mock

import pytest
from tienda.application.usecases.ledger import RecordWebhookUseCase, WebhookOutcome
from tienda.application.usecases.ledger.record_webhook import (
    CREATED_NOTE,
    UPDATED_NOTE,
    customer_from_event,
    parse_line_items,
)
from tienda.crosscutting.exceptions import DatabaseError
from tienda.domain.ledger import TransactionStatus
from tienda.domain.repositories import TransactionFilters, TransactionRepository
from tienda.infrastructure.repositories.in_memory import InMemoryTransactionRepository

pytestmark = pytest.mark.unit


def _event(status: str = "approved", payment_id: str = "P1", **extra) -> dict:
    event = {
        "event": "payment.updated",
        "payment_id": payment_id,
        "status": status,
        "items": [{"title": "Perfume", "unit_price": 10, "quantity": 2}],
        "payer": {"email": "Cliente@Example.com", "name": "Ana"},
    }
    event.update(extra)
    return event


@pytest.fixture
def repo() -> InMemoryTransactionRepository:
    return InMemoryTransactionRepository()


@pytest.fixture
def use_case(repo) -> RecordWebhookUseCase:
    return RecordWebhookUseCase(repo)


class TestRecordWebhook:
    def test_first_delivery_creates_transaction(self, use_case, repo):
        result = use_case.execute(_event())

        assert result.outcome == WebhookOutcome.CREATED
        tx = repo.find_by_external_id("P1")
        assert tx is not None
        assert tx.status == TransactionStatus.APPROVED
        assert tx.amount == 20
        assert tx.customer.email == "cliente@example.com"
        assert [e.note for e in tx.status_history] == [CREATED_NOTE]
        assert tx.webhook_data["payment_id"] == "P1"

    def test_identical_redelivery_is_a_no_op(self, use_case, repo):
        use_case.execute(_event())

        result = use_case.execute(_event())

        assert result.outcome == WebhookOutcome.UNCHANGED
        assert len(repo.find_by_external_id("P1").status_history) == 1

    def test_status_change_appends_system_entry(self, use_case, repo):
        use_case.execute(_event("approved"))

        result = use_case.execute(_event("rejected"))

        assert result.outcome == WebhookOutcome.UPDATED
        tx = repo.find_by_external_id("P1")
        assert tx.status == TransactionStatus.REJECTED
        assert len(tx.status_history) == 2
        last = tx.status_history[-1]
        assert last.note == UPDATED_NOTE
        assert last.changed_by is None

    def test_unknown_status_is_ignored(self, use_case, repo):
        result = use_case.execute(_event("paid"))

        assert result.outcome == WebhookOutcome.IGNORED
        assert repo.find_by_external_id("P1") is None

    def test_unknown_status_does_not_touch_existing(self, use_case, repo):
        use_case.execute(_event("pending"))

        use_case.execute(_event("chargeback"))

        tx = repo.find_by_external_id("P1")
        assert tx.status == TransactionStatus.PENDING
        assert len(tx.status_history) == 1

    def test_missing_payment_id_is_ignored(self, use_case):
        result = use_case.execute({"status": "approved"})

        assert result.outcome == WebhookOutcome.IGNORED

    def test_concurrent_deliveries_create_one_transaction(self, repo):
        workers = 8
        barrier = Barrier(workers)

        def deliver(_):
            barrier.wait()
            return RecordWebhookUseCase(repo).execute(_event())

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = [r.outcome for r in pool.map(deliver, range(workers))]

        assert outcomes.count(WebhookOutcome.CREATED) == 1
        assert set(outcomes) <= {WebhookOutcome.CREATED, WebhookOutcome.UNCHANGED}
        page, total = repo.query(TransactionFilters(), limit=10, skip=0)
        assert total == 1
        assert len(page[0].status_history) == 1

    def test_database_failure_reports_failed(self):
        repo = Mock(spec=TransactionRepository)
        repo.find_by_external_id.side_effect = DatabaseError("down")

        result = RecordWebhookUseCase(repo).execute(_event())

        assert result.outcome == WebhookOutcome.FAILED


class TestEventParsing:
    def test_malformed_items_are_discarded(self):
        items = parse_line_items(
            [
                {"title": "ok", "unit_price": "5", "quantity": 3},
                {"title": "sin precio", "quantity": 1},
                "basura",
            ]
        )

        assert [(i.title, i.subtotal) for i in items] == [("ok", 15.0)]

    def test_customer_from_payer_phone_object(self):
        customer = customer_from_event(
            {"payer": {"first_name": "Ana", "phone": {"number": "1155"}}}
        )

        assert customer.name == "Ana"
        assert customer.phone == "1155"
        assert customer.email is None
