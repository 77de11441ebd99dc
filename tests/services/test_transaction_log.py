"""
Tests for the TransactionLog.

Covers what each recorded entry looks like, how flat side
columns become EntrySide views, and the append-only guard.
"""

from decimal import Decimal

import pytest

from banking_ledger.models.enums import EntryType, EntryStatus
from banking_ledger.models.ledger_entry import LedgerEntry, ImmutableEntryError
from banking_ledger.services.transaction_log import (
    TransactionLog,
    INSUFFICIENT_FUNDS_REASON,
)


@pytest.fixture
def log(store):
    return TransactionLog(store)


def record(store, write):
    """Append through the log in its own unit of work and return the id."""
    with store.unit_of_work() as session:
        entry = write(session)
        entry_id = entry.id
    return entry_id


def load(store, entry_id):
    with store.unit_of_work() as session:
        entry = session.get(LedgerEntry, entry_id)
        session.expunge(entry)
    return entry


class TestRecording:

    def test_opening_deposit(self, store, log):
        entry_id = record(
            store, lambda s: log.record_opening_deposit(s, "A1", Decimal("100.00"))
        )

        entry = load(store, entry_id)
        assert entry.entry_type == EntryType.DEPOSIT
        assert entry.status == EntryStatus.SUCCESS
        assert entry.source_account is None
        assert entry.destination_account == "A1"
        assert entry.balance_before_destination == Decimal("0")
        assert entry.balance_after_destination == Decimal("100.00")
        assert entry.description == "Initial deposit on account creation"
        assert entry.created_at is not None

    def test_deposit_description(self, store, log):
        entry_id = record(store, lambda s: log.record_deposit(
            s, "A1", Decimal("1500.5"), Decimal("0"), Decimal("1500.5")
        ))

        assert load(store, entry_id).description == "Deposit of 1,500.50"

    def test_successful_withdrawal(self, store, log):
        entry_id = record(store, lambda s: log.record_withdrawal(
            s, "A1", Decimal("40"), Decimal("100"), Decimal("60")
        ))

        entry = load(store, entry_id)
        assert entry.status == EntryStatus.SUCCESS
        assert entry.failure_reason is None
        assert entry.destination_account is None
        assert entry.description == "Withdrawal of 40.00"

    def test_refused_withdrawal(self, store, log):
        entry_id = record(store, lambda s: log.record_withdrawal(
            s, "A1", Decimal("150"), Decimal("100"), Decimal("100"),
            failure_reason=INSUFFICIENT_FUNDS_REASON,
        ))

        entry = load(store, entry_id)
        assert entry.status == EntryStatus.FAILED
        assert entry.failure_reason == INSUFFICIENT_FUNDS_REASON
        assert entry.description == "Withdrawal attempt of 150.00"

    def test_transfer_fills_both_sides(self, store, log):
        entry_id = record(store, lambda s: log.record_transfer(
            s, "A1", "A2", Decimal("30"),
            Decimal("100"), Decimal("70"), Decimal("50"), Decimal("80"),
        ))

        entry = load(store, entry_id)
        assert entry.entry_type == EntryType.TRANSFER
        assert entry.source_account == "A1"
        assert entry.destination_account == "A2"
        assert entry.balance_after_source == Decimal("70")
        assert entry.balance_after_destination == Decimal("80")
        assert entry.description == "Transfer of 30.00 from A1 to A2"

    def test_entry_rolls_back_with_its_unit_of_work(self, store, log):
        with pytest.raises(RuntimeError):
            with store.unit_of_work() as session:
                log.record_deposit(
                    session, "A1", Decimal("5"), Decimal("0"), Decimal("5")
                )
                raise RuntimeError("abort")

        assert store.query_transactions(None, 10) == []


class TestToView:

    def test_deposit_has_no_source_side(self, store, log):
        entry_id = record(store, lambda s: log.record_deposit(
            s, "A1", Decimal("5"), Decimal("0"), Decimal("5")
        ))

        view = TransactionLog.to_view(load(store, entry_id))

        assert view.source is None
        assert view.destination.account_number == "A1"
        assert view.destination.balance_after == Decimal("5")

    def test_withdrawal_has_no_destination_side(self, store, log):
        entry_id = record(store, lambda s: log.record_withdrawal(
            s, "A1", Decimal("5"), Decimal("10"), Decimal("5")
        ))

        view = TransactionLog.to_view(load(store, entry_id))

        assert view.destination is None
        assert view.source.balance_before == Decimal("10")
        assert view.source.balance_after == Decimal("5")

    def test_transfer_has_both_sides(self, store, log):
        entry_id = record(store, lambda s: log.record_transfer(
            s, "A1", "A2", Decimal("30"),
            Decimal("100"), Decimal("70"), Decimal("50"), Decimal("80"),
        ))

        view = TransactionLog.to_view(load(store, entry_id))

        assert view.id == entry_id
        assert view.source.account_number == "A1"
        assert view.destination.account_number == "A2"
        assert view.amount == Decimal("30")


class TestAppendOnly:

    def test_update_refused(self, store, log):
        entry_id = record(store, lambda s: log.record_deposit(
            s, "A1", Decimal("5"), Decimal("0"), Decimal("5")
        ))

        with pytest.raises(ImmutableEntryError):
            with store.unit_of_work() as session:
                entry = session.get(LedgerEntry, entry_id)
                entry.amount = Decimal("500")
                session.flush()

        assert load(store, entry_id).amount == Decimal("5")

    def test_delete_refused(self, store, log):
        entry_id = record(store, lambda s: log.record_deposit(
            s, "A1", Decimal("5"), Decimal("0"), Decimal("5")
        ))

        with pytest.raises(ImmutableEntryError):
            with store.unit_of_work() as session:
                session.delete(session.get(LedgerEntry, entry_id))
                session.flush()

        assert load(store, entry_id) is not None
