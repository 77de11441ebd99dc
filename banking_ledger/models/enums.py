"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid entry_type or
status is caught at the database level, not just in Python
validation.
"""

import enum


class EntryType(str, enum.Enum):
    """The kind of operation a ledger entry records."""
    CREATE = "CREATE"  # reserved; opening balances are booked as DEPOSIT
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER = "TRANSFER"


class EntryStatus(str, enum.Enum):
    """Outcome of the recorded attempt."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
