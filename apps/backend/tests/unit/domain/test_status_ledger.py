"""
Name: Status Ledger Unit Tests

Responsibilities:
  - Verify the append-only history keeps `current` equal to the last entry
  - Verify strict parsing of external status values
  - Verify JSON round trip of history entries (JSONB / HTTP shape)

Collaborators:
  - tienda.domain.ledger
  - tienda.domain.entities.Transaction
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from tienda.domain.entities import LineItem, Transaction, total_of
from tienda.domain.ledger import (
    InvalidStatusError,
    OrderStatus,
    ShippingStatus,
    StatusLedger,
    TransactionStatus,
    parse_status,
)

pytestmark = pytest.mark.unit


def _transaction(status: TransactionStatus = TransactionStatus.PENDING) -> Transaction:
    items = [LineItem.of("Perfume", 10, 2)]
    return Transaction(
        id=uuid4(),
        transaction_id="P1",
        items=items,
        amount=total_of(items),
        ledger=StatusLedger.opened_with(TransactionStatus, status),
    )


class TestStatusLedger:
    def test_opened_with_seeds_single_entry(self):
        ledger = StatusLedger.opened_with(
            TransactionStatus, "approved", note="Transacción creada desde webhook"
        )

        assert len(ledger) == 1
        assert ledger.current == TransactionStatus.APPROVED
        assert ledger.entries[0].note == "Transacción creada desde webhook"
        assert ledger.entries[0].changed_by is None

    def test_current_follows_last_recorded_entry(self):
        actor = uuid4()
        ledger = StatusLedger.opened_with(TransactionStatus, TransactionStatus.PENDING)

        ledger.record(TransactionStatus.APPROVED, changed_by=actor)
        ledger.record("refunded", note="devolución")

        assert ledger.current == TransactionStatus.REFUNDED
        assert [e.status for e in ledger.entries] == [
            TransactionStatus.PENDING,
            TransactionStatus.APPROVED,
            TransactionStatus.REFUNDED,
        ]
        assert ledger.entries[1].changed_by == actor

    def test_any_status_can_follow_any_other(self):
        ledger = StatusLedger.opened_with(TransactionStatus, "refunded")

        ledger.record("pending")

        assert ledger.current == TransactionStatus.PENDING

    def test_change_for_does_not_record(self):
        ledger = StatusLedger.opened_with(OrderStatus, OrderStatus.PENDING)

        change = ledger.change_for("shipped")

        assert change.status == OrderStatus.SHIPPED
        assert len(ledger) == 1
        assert ledger.current == OrderStatus.PENDING

    def test_invalid_status_is_rejected_and_history_untouched(self):
        ledger = StatusLedger.opened_with(TransactionStatus, "pending")

        with pytest.raises(InvalidStatusError):
            ledger.record("paid")

        assert len(ledger) == 1

    def test_entries_is_a_snapshot(self):
        ledger = StatusLedger.opened_with(TransactionStatus, "pending")
        snapshot = ledger.entries

        ledger.record("approved")

        assert len(snapshot) == 1
        assert len(ledger.entries) == 2

    def test_round_trip_through_dicts(self):
        at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        actor = uuid4()
        ledger = StatusLedger.opened_with(
            ShippingStatus, "preparing", changed_by=actor, note="armado", at=at
        )

        restored = StatusLedger.from_list(ShippingStatus, ledger.to_list())

        assert restored.entries == ledger.entries
        assert ledger.to_list()[0] == {
            "status": "preparing",
            "changedAt": at.isoformat(),
            "changedBy": str(actor),
            "note": "armado",
        }

    def test_from_list_accepts_none(self):
        assert len(StatusLedger.from_list(TransactionStatus, None)) == 0


class TestParseStatus:
    @pytest.mark.parametrize("raw", ["approved", " approved ", TransactionStatus.APPROVED])
    def test_accepts_vocabulary_values(self, raw):
        assert parse_status(TransactionStatus, raw) == TransactionStatus.APPROVED

    def test_error_lists_allowed_values(self):
        with pytest.raises(InvalidStatusError) as exc_info:
            parse_status(ShippingStatus, "lost")

        assert exc_info.value.value == "lost"
        assert "in_transit" in exc_info.value.allowed
        assert "lost" in str(exc_info.value)

    def test_vocabularies_are_independent(self):
        with pytest.raises(InvalidStatusError):
            parse_status(OrderStatus, "approved")


class TestTransactionStatus:
    def test_status_is_last_history_entry(self):
        tx = _transaction()
        change = tx.ledger.change_for("rejected")

        tx.apply_status(change)

        assert tx.status == TransactionStatus.REJECTED
        assert len(tx.status_history) == 2
        assert tx.updated_at == change.changed_at

    def test_amount_is_sum_of_subtotals(self):
        items = [LineItem.of("A", 100, 2), LineItem.of("B", 50, 1)]

        assert [i.subtotal for i in items] == [200, 50]
        assert total_of(items) == 250

    def test_owner_matches_user_id_or_contact_email(self):
        owner = uuid4()
        tx = _transaction()
        tx.user_id = owner

        assert tx.is_owned_by(owner, None)
        assert not tx.is_owned_by(uuid4(), "otro@example.com")

    def test_owner_matches_email_case_insensitively(self):
        tx = _transaction()
        tx.customer = type(tx.customer)(email="Cliente@Example.com")

        assert tx.is_owned_by(uuid4(), "cliente@example.com")
