"""
Account model.

The account row holds the authoritative balance. Only the
ledger engine changes it, always under a row lock inside a
unit of work. Accounts are never deleted; deactivation flips
the active flag once the balance is zero.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, DateTime, Numeric, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from banking_ledger.models.base import Base

ACCOUNT_NUMBER_MAX_LENGTH = 20
OWNER_NAME_MAX_LENGTH = 100


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_number: Mapped[str] = mapped_column(
        String(ACCOUNT_NUMBER_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    owner_name: Mapped[str] = mapped_column(
        String(OWNER_NAME_MAX_LENGTH), nullable=False
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        state = "active" if self.active else "inactive"
        return f"<Account {self.account_number} {self.balance} ({state})>"
