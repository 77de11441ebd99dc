"""
Account API endpoints.
"""

from fastapi import APIRouter, Depends

from banking_ledger.api.deps import get_ledger, unwrap
from banking_ledger.services.ledger_engine import LedgerEngine
from banking_ledger.schemas.account import (
    AccountCreate,
    AccountView,
    AccountBalanceResponse,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountView, status_code=201)
def create_account(
    request: AccountCreate,
    ledger: LedgerEngine = Depends(get_ledger),
):
    """
    Open a new account.

    A positive initial balance is recorded as a deposit
    in the transaction log.
    """
    return unwrap(ledger.create_account(
        request.account_number,
        request.owner_name,
        request.initial_balance,
    ))


@router.get("", response_model=list[AccountView])
def list_accounts(ledger: LedgerEngine = Depends(get_ledger)):
    """Active accounts ordered by account number."""
    return unwrap(ledger.list_accounts())


@router.get("/{account_number}", response_model=AccountView)
def get_account(
    account_number: str,
    ledger: LedgerEngine = Depends(get_ledger),
):
    return unwrap(ledger.get_account(account_number))


@router.get("/{account_number}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    account_number: str,
    ledger: LedgerEngine = Depends(get_ledger),
):
    balance = unwrap(ledger.get_balance(account_number))
    return AccountBalanceResponse(
        account_number=account_number.strip(),
        balance=balance,
    )


@router.delete("/{account_number}", response_model=AccountView)
def deactivate_account(
    account_number: str,
    ledger: LedgerEngine = Depends(get_ledger),
):
    """
    Deactivate an account.

    Refused with 409 while the account holds any balance.
    """
    return unwrap(ledger.deactivate_account(account_number))
