"""
Pydantic schemas for deposits, withdrawals, and transfers.

Amounts are deliberately unconstrained here: the ledger
engine is the single place that decides whether an amount is
acceptable, and it answers with a typed InvalidAmount failure.
"""

from decimal import Decimal

from pydantic import BaseModel


class DepositRequest(BaseModel):
    account_number: str
    amount: Decimal


class WithdrawalRequest(BaseModel):
    account_number: str
    amount: Decimal


class TransferRequest(BaseModel):
    source_account: str
    destination_account: str
    amount: Decimal


class BalanceChange(BaseModel):
    """Balances of one account around a committed operation."""
    account_number: str
    previous_balance: Decimal
    new_balance: Decimal
    entry_id: int | None = None


class TransferOutcome(BaseModel):
    source: BalanceChange
    destination: BalanceChange
    entry_id: int


class FailureResponse(BaseModel):
    """Error body returned by the HTTP layer."""
    error: str
    message: str
    entry_id: int | None = None
