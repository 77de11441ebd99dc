"""
Ledger entry model.

Each entry is the audit record of one attempted balance
mutation, successful or not. Entries are immutable: once
flushed they are never modified or deleted. The mapper
events at the bottom of this module refuse any attempt to do
so through the ORM.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, CheckConstraint,
    Enum as SAEnum, event,
)
from sqlalchemy.orm import Mapped, mapped_column

from banking_ledger.models.account import ACCOUNT_NUMBER_MAX_LENGTH
from banking_ledger.models.base import Base
from banking_ledger.models.enums import EntryType, EntryStatus


class LedgerEntry(Base):
    """
    An immutable record of an attempted operation.

    Source columns are filled when money leaves an account,
    destination columns when money arrives. A deposit has no
    source; a withdrawal has no destination.
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum", create_constraint=True),
        nullable=False,
    )
    source_account: Mapped[str | None] = mapped_column(
        String(ACCOUNT_NUMBER_MAX_LENGTH), nullable=True, index=True
    )
    destination_account: Mapped[str | None] = mapped_column(
        String(ACCOUNT_NUMBER_MAX_LENGTH), nullable=True, index=True
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False
    )
    balance_before_source: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2), nullable=True
    )
    balance_after_source: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2), nullable=True
    )
    balance_before_destination: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2), nullable=True
    )
    balance_after_destination: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2), nullable=True
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False
    )
    status: Mapped[EntryStatus] = mapped_column(
        SAEnum(EntryStatus, name="entry_status_enum", create_constraint=True),
        nullable=False,
    )
    failure_reason: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.entry_type.value} "
            f"{self.amount} ({self.status.value})>"
        )


class ImmutableEntryError(RuntimeError):
    """Raised when code tries to change a written ledger entry."""


@event.listens_for(LedgerEntry, "before_update")
def _refuse_update(mapper, connection, target):
    raise ImmutableEntryError(
        f"Ledger entry {target.id} is append-only and cannot be updated"
    )


@event.listens_for(LedgerEntry, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise ImmutableEntryError(
        f"Ledger entry {target.id} is append-only and cannot be deleted"
    )
