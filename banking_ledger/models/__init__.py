"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from banking_ledger.models.base import Base
from banking_ledger.models.enums import EntryType, EntryStatus
from banking_ledger.models.account import Account
from banking_ledger.models.ledger_entry import LedgerEntry, ImmutableEntryError

__all__ = [
    "Base",
    "EntryType",
    "EntryStatus",
    "Account",
    "LedgerEntry",
    "ImmutableEntryError",
]
