"""
Pydantic schemas for transaction log entries.

The table stores source and destination as flat, nullable
columns. The view groups each side into an EntrySide and
leaves the whole side as None when the operation had no
such account, so a half-populated side cannot exist.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from banking_ledger.models.enums import EntryType, EntryStatus


class EntrySide(BaseModel):
    """One account's part in a recorded operation."""
    account_number: str
    balance_before: Decimal
    balance_after: Decimal


class LedgerEntryView(BaseModel):
    """A transaction log entry in API responses."""
    id: int
    entry_type: EntryType
    source: EntrySide | None
    destination: EntrySide | None
    amount: Decimal
    description: str
    status: EntryStatus
    failure_reason: str | None
    created_at: datetime
