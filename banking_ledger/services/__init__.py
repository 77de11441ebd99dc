"""Business logic services."""

from banking_ledger.services.account_registry import AccountRegistry
from banking_ledger.services.transaction_log import TransactionLog
from banking_ledger.services.ledger_engine import LedgerEngine

__all__ = ["AccountRegistry", "TransactionLog", "LedgerEngine"]
