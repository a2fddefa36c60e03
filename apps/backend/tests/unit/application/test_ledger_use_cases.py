"""
Name: Ledger Use Case Tests

Responsibilities:
  - Admin status transitions (single write, actor recorded, strict vocabulary)
  - Shipping log and notes
  - Query filters / pagination, stats read-model, "my orders" ownership
  - Test order fixture (approved, amount recomputed)
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from tienda.application.usecases.ledger import (
    TEST_ORDER_NOTE,
    CreateTestOrderInput,
    CreateTestOrderUseCase,
    GetMyOrderUseCase,
    LedgerErrorCode,
    MyOrdersUseCase,
    QueryTransactionsInput,
    QueryTransactionsUseCase,
    RecordWebhookUseCase,
    TransactionStatsUseCase,
    TransitionStatusInput,
    TransitionStatusUseCase,
    UpdateNotesUseCase,
    UpdateShippingInput,
    UpdateShippingUseCase,
)
from tienda.domain.entities import LineItem
from tienda.domain.ledger import ShippingStatus, TransactionStatus
from tienda.identity.users import User, UserRole
from tienda.infrastructure.repositories.in_memory import InMemoryTransactionRepository

pytestmark = pytest.mark.unit


@pytest.fixture
def repo() -> InMemoryTransactionRepository:
    return InMemoryTransactionRepository()


def _customer(email: str = "ana@example.com") -> User:
    return User(id=uuid4(), email=email, password_hash="x", role=UserRole.USER, name="Ana")


def _webhook(repo, payment_id: str, status: str = "approved", *, email=None, price=10):
    event = {
        "payment_id": payment_id,
        "status": status,
        "items": [{"title": "Crema", "unit_price": price, "quantity": 1}],
    }
    if email:
        event["payer"] = {"email": email}
    return RecordWebhookUseCase(repo).execute(event).transaction


class TestTransitionStatus:
    def test_records_actor_and_note(self, repo):
        tx = _webhook(repo, "P1", "pending")
        actor = uuid4()

        result = TransitionStatusUseCase(repo).execute(
            TransitionStatusInput(tx.id, "approved", actor, note=" acreditado ")
        )

        assert result.transaction.status == TransactionStatus.APPROVED
        last = result.transaction.status_history[-1]
        assert last.changed_by == actor
        assert last.note == "acreditado"

    def test_same_status_still_appends(self, repo):
        tx = _webhook(repo, "P1", "approved")

        result = TransitionStatusUseCase(repo).execute(
            TransitionStatusInput(tx.id, "approved", uuid4())
        )

        assert len(result.transaction.status_history) == 2

    def test_invalid_status(self, repo):
        tx = _webhook(repo, "P1")

        result = TransitionStatusUseCase(repo).execute(
            TransitionStatusInput(tx.id, "paid", uuid4())
        )

        assert result.error.code == LedgerErrorCode.VALIDATION_ERROR
        assert len(repo.get(tx.id).status_history) == 1

    def test_missing_transaction(self, repo):
        result = TransitionStatusUseCase(repo).execute(
            TransitionStatusInput(uuid4(), "approved", None)
        )

        assert result.error.code == LedgerErrorCode.NOT_FOUND


class TestShippingAndNotes:
    def test_shipping_change_is_logged(self, repo):
        tx = _webhook(repo, "P1")
        use_case = UpdateShippingUseCase(repo)

        use_case.execute(UpdateShippingInput(tx.id, None, shipping_status="dispatched"))
        result = use_case.execute(
            UpdateShippingInput(tx.id, None, tracking_number="AR123")
        )

        updated = result.transaction
        assert updated.shipping_status == ShippingStatus.DISPATCHED
        assert updated.tracking_number == "AR123"
        assert len(updated.shipping_history) == 2
        assert updated.status == TransactionStatus.APPROVED

    def test_invalid_shipping_status(self, repo):
        tx = _webhook(repo, "P1")

        result = UpdateShippingUseCase(repo).execute(
            UpdateShippingInput(tx.id, None, shipping_status="lost")
        )

        assert result.error.code == LedgerErrorCode.VALIDATION_ERROR

    def test_notes(self, repo):
        tx = _webhook(repo, "P1")

        result = UpdateNotesUseCase(repo).execute(tx.id, "llamar antes")

        assert result.transaction.notes == "llamar antes"


class TestQueries:
    def test_filters_and_pagination(self, repo):
        for i in range(5):
            _webhook(repo, f"A{i}", "approved")
        _webhook(repo, "R1", "rejected")
        query = QueryTransactionsUseCase(repo)

        page = query.execute(QueryTransactionsInput(status="approved", limit=2, skip=0))
        rest = query.execute(QueryTransactionsInput(status="approved", limit=2, skip=4))

        assert page.total == 5
        assert len(page.transactions) == 2
        assert page.has_more is True
        assert len(rest.transactions) == 1
        assert rest.has_more is False

    def test_search_matches_external_id_and_email(self, repo):
        _webhook(repo, "ABC-1", email="zoe@example.com")
        _webhook(repo, "XYZ-2")
        query = QueryTransactionsUseCase(repo)

        assert query.execute(QueryTransactionsInput(search="abc")).total == 1
        assert query.execute(QueryTransactionsInput(search="ZOE@")).total == 1

    def test_date_range_excludes_outside(self, repo):
        _webhook(repo, "P1")
        future = datetime.now(timezone.utc) + timedelta(days=1)

        page = QueryTransactionsUseCase(repo).execute(QueryTransactionsInput(start=future))

        assert page.total == 0

    def test_date_bounds_without_offset_are_utc(self, repo):
        _webhook(repo, "P1")

        page = QueryTransactionsUseCase(repo).execute(
            QueryTransactionsInput(start=datetime(2020, 1, 1), end=datetime(2999, 1, 1))
        )
        stats = TransactionStatsUseCase(repo).execute(start=datetime(2020, 1, 1))
        later = TransactionStatsUseCase(repo).execute(start=datetime(2999, 1, 1))

        assert page.total == 1
        assert stats.total.count == 1
        assert later.total.count == 0

    def test_invalid_status_filter(self, repo):
        page = QueryTransactionsUseCase(repo).execute(QueryTransactionsInput(status="x"))

        assert page.error.code == LedgerErrorCode.VALIDATION_ERROR

    def test_stats_include_every_status(self, repo):
        _webhook(repo, "P1", "approved", price=100)
        _webhook(repo, "P2", "approved", price=50)
        _webhook(repo, "P3", "rejected", price=30)

        stats = TransactionStatsUseCase(repo).execute()

        assert set(stats.by_status) == set(TransactionStatus)
        assert stats.by_status[TransactionStatus.REFUNDED].count == 0
        assert stats.approved.count == 2
        assert stats.approved.amount == 150
        assert stats.total.count == 3
        assert stats.total.amount == 180
        assert len(stats.recent) == 3


class TestMyOrders:
    def test_owner_by_user_id_or_email(self, repo):
        user = _customer("ana@example.com")
        CreateTestOrderUseCase(repo).execute(CreateTestOrderInput(user=user))
        _webhook(repo, "GUEST", "pending", email="ANA@example.com")
        _webhook(repo, "OTHER", email="otro@example.com")

        result = MyOrdersUseCase(repo).execute(user)

        assert len(result.orders) == 2
        assert result.counts["total"] == 2
        assert result.counts["approved"] == 1
        assert result.counts["pending"] == 1

    def test_foreign_order_is_forbidden(self, repo):
        other = _webhook(repo, "OTHER", email="otro@example.com")

        result = GetMyOrderUseCase(repo).execute(_customer(), other.id)

        assert result.error.code == LedgerErrorCode.FORBIDDEN

    def test_missing_order(self, repo):
        result = GetMyOrderUseCase(repo).execute(_customer(), uuid4())

        assert result.error.code == LedgerErrorCode.NOT_FOUND


class TestCreateTestOrder:
    def test_default_items(self, repo):
        user = _customer()

        tx = CreateTestOrderUseCase(repo).execute(CreateTestOrderInput(user=user)).transaction

        assert tx.status == TransactionStatus.APPROVED
        assert tx.amount == 250
        assert tx.notes == TEST_ORDER_NOTE
        assert tx.transaction_id.startswith("TEST_")
        assert tx.payment_id.startswith("TEST_PAYMENT_")
        assert tx.user_id == user.id
        assert tx.status_history[0].changed_by == user.id

    def test_amount_is_recomputed_from_items(self, repo):
        items = [LineItem.of("Labial", 12.5, 4)]

        tx = CreateTestOrderUseCase(repo).execute(
            CreateTestOrderInput(user=_customer(), items=items)
        ).transaction

        assert tx.amount == 50
