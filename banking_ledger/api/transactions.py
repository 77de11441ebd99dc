"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, Query

from banking_ledger.api.deps import get_ledger, unwrap
from banking_ledger.services.ledger_engine import LedgerEngine
from banking_ledger.schemas.ledger import LedgerEntryView
from banking_ledger.schemas.transaction import (
    DepositRequest,
    WithdrawalRequest,
    TransferRequest,
    BalanceChange,
    TransferOutcome,
)

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("/deposit", response_model=BalanceChange, status_code=201)
def deposit(
    request: DepositRequest,
    ledger: LedgerEngine = Depends(get_ledger),
):
    """Deposit money into an account."""
    return unwrap(ledger.deposit(request.account_number, request.amount))


@router.post("/withdraw", response_model=BalanceChange, status_code=201)
def withdraw(
    request: WithdrawalRequest,
    ledger: LedgerEngine = Depends(get_ledger),
):
    """
    Withdraw money from an account.

    A refusal for insufficient funds is still recorded; the
    409 body carries the id of the FAILED entry.
    """
    return unwrap(ledger.withdraw(request.account_number, request.amount))


@router.post("/transfer", response_model=TransferOutcome, status_code=201)
def transfer(
    request: TransferRequest,
    ledger: LedgerEngine = Depends(get_ledger),
):
    """Transfer money between two accounts."""
    return unwrap(ledger.transfer(
        request.source_account,
        request.destination_account,
        request.amount,
    ))


@router.get("", response_model=list[LedgerEntryView])
def list_transactions(
    account: str | None = None,
    limit: int | None = Query(default=None, ge=1),
    ledger: LedgerEngine = Depends(get_ledger),
):
    """Transaction log, newest first, optionally for one account."""
    return unwrap(ledger.list_transactions(account, limit))
