"""
Transaction log — the append-only audit trail.

Every attempted balance mutation that gets far enough to be
decided leaves exactly one entry here, whether it succeeded
or was refused for insufficient funds. Entries are appended
through the caller's session, so they commit or roll back
together with the balance change they describe. There is no
way to log outside that boundary.
"""

from decimal import Decimal

from sqlalchemy.orm import Session

from banking_ledger.models.enums import EntryType, EntryStatus
from banking_ledger.models.ledger_entry import LedgerEntry
from banking_ledger.schemas.ledger import EntrySide, LedgerEntryView
from banking_ledger.store import BalanceStore

INSUFFICIENT_FUNDS_REASON = "insufficient funds"

ZERO = Decimal("0.00")


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


class TransactionLog:

    def __init__(self, store: BalanceStore):
        self.store = store

    def _append(self, session: Session, **fields) -> LedgerEntry:
        return self.store.append_ledger_entry(session, LedgerEntry(**fields))

    # --- Recording ---

    def record_opening_deposit(
        self, session: Session, account_number: str, amount: Decimal
    ) -> LedgerEntry:
        """The initial balance of a new account, booked as a deposit from 0."""
        return self._append(
            session,
            entry_type=EntryType.DEPOSIT,
            destination_account=account_number,
            amount=amount,
            balance_before_destination=ZERO,
            balance_after_destination=amount,
            description="Initial deposit on account creation",
            status=EntryStatus.SUCCESS,
        )

    def record_deposit(
        self, session: Session, account_number: str, amount: Decimal,
        balance_before: Decimal, balance_after: Decimal,
    ) -> LedgerEntry:
        return self._append(
            session,
            entry_type=EntryType.DEPOSIT,
            destination_account=account_number,
            amount=amount,
            balance_before_destination=balance_before,
            balance_after_destination=balance_after,
            description=f"Deposit of {_money(amount)}",
            status=EntryStatus.SUCCESS,
        )

    def record_withdrawal(
        self, session: Session, account_number: str, amount: Decimal,
        balance_before: Decimal, balance_after: Decimal,
        failure_reason: str | None = None,
    ) -> LedgerEntry:
        """
        Record a withdrawal or a refused withdrawal attempt.

        A failure_reason marks the entry FAILED; the caller then
        passes balance_after == balance_before.
        """
        if failure_reason:
            description = f"Withdrawal attempt of {_money(amount)}"
            status = EntryStatus.FAILED
        else:
            description = f"Withdrawal of {_money(amount)}"
            status = EntryStatus.SUCCESS

        return self._append(
            session,
            entry_type=EntryType.WITHDRAW,
            source_account=account_number,
            amount=amount,
            balance_before_source=balance_before,
            balance_after_source=balance_after,
            description=description,
            status=status,
            failure_reason=failure_reason,
        )

    def record_transfer(
        self, session: Session, source: str, destination: str, amount: Decimal,
        source_before: Decimal, source_after: Decimal,
        destination_before: Decimal, destination_after: Decimal,
        failure_reason: str | None = None,
    ) -> LedgerEntry:
        if failure_reason:
            description = f"Transfer attempt of {_money(amount)} from {source} to {destination}"
            status = EntryStatus.FAILED
        else:
            description = f"Transfer of {_money(amount)} from {source} to {destination}"
            status = EntryStatus.SUCCESS

        return self._append(
            session,
            entry_type=EntryType.TRANSFER,
            source_account=source,
            destination_account=destination,
            amount=amount,
            balance_before_source=source_before,
            balance_after_source=source_after,
            balance_before_destination=destination_before,
            balance_after_destination=destination_after,
            description=description,
            status=status,
            failure_reason=failure_reason,
        )

    # --- Reading ---

    @staticmethod
    def to_view(entry: LedgerEntry) -> LedgerEntryView:
        """Group the flat side columns into optional EntrySide values."""
        source = None
        if entry.source_account is not None:
            source = EntrySide(
                account_number=entry.source_account,
                balance_before=entry.balance_before_source,
                balance_after=entry.balance_after_source,
            )

        destination = None
        if entry.destination_account is not None:
            destination = EntrySide(
                account_number=entry.destination_account,
                balance_before=entry.balance_before_destination,
                balance_after=entry.balance_after_destination,
            )

        return LedgerEntryView(
            id=entry.id,
            entry_type=entry.entry_type,
            source=source,
            destination=destination,
            amount=entry.amount,
            description=entry.description,
            status=entry.status,
            failure_reason=entry.failure_reason,
            created_at=entry.created_at,
        )
