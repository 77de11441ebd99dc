"""
Pydantic schemas for account operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class AccountCreate(BaseModel):
    """
    Request to open a new account.

    Lengths are checked by the ledger engine after trimming.
    """
    account_number: str
    owner_name: str
    initial_balance: Decimal = Decimal("0")


class AccountView(BaseModel):
    """
    Snapshot of an account row.

    Built inside the unit of work that read it, so it stays
    valid after the session closes.
    """
    id: int
    account_number: str
    owner_name: str
    balance: Decimal
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    account_number: str
    balance: Decimal
