"""Single-ledger banking engine with an append-only audit trail."""

from banking_ledger.results import ErrorKind, Failure, Result, Success
from banking_ledger.store import BalanceStore
from banking_ledger.services.ledger_engine import LedgerEngine

__all__ = [
    "BalanceStore",
    "ErrorKind",
    "Failure",
    "LedgerEngine",
    "Result",
    "Success",
]
