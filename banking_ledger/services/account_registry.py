"""
Account registry — existence and activity checks.

Every check takes the caller's session, so it runs inside the
same unit of work as the mutation that depends on it. Asking
"does A1 exist?" in one transaction and then writing in
another would race with concurrent creators and deactivators.
"""

from sqlalchemy.orm import Session

from banking_ledger.models.account import Account, ACCOUNT_NUMBER_MAX_LENGTH
from banking_ledger.results import ErrorKind, LedgerError
from banking_ledger.store import BalanceStore


class AccountRegistry:

    def __init__(self, store: BalanceStore):
        self.store = store

    @staticmethod
    def normalize(account_number: str | None) -> str:
        """
        Strip surrounding whitespace; None becomes ''.

        Raises LedgerError(INVALID_ARGUMENT) for anything that
        is not a string.
        """
        if account_number is None:
            return ""
        if not isinstance(account_number, str):
            raise LedgerError(
                ErrorKind.INVALID_ARGUMENT,
                f"Account number must be a string, got {account_number!r}",
            )
        return account_number.strip()

    @staticmethod
    def validate_new_number(account_number: str) -> None:
        """Reject numbers that cannot be stored."""
        if not account_number:
            raise LedgerError(
                ErrorKind.INVALID_ARGUMENT, "Account number must not be blank"
            )
        if len(account_number) > ACCOUNT_NUMBER_MAX_LENGTH:
            raise LedgerError(
                ErrorKind.INVALID_ARGUMENT,
                f"Account number must be at most "
                f"{ACCOUNT_NUMBER_MAX_LENGTH} characters",
            )

    def exists(self, session: Session, account_number: str) -> bool:
        """True if an active account has this number."""
        return self.store.account_exists(session, account_number)

    def is_registered(self, session: Session, account_number: str) -> bool:
        """True if any account, active or not, has ever used this number."""
        return self.store.account_exists(
            session, account_number, include_inactive=True
        )

    def require_active(self, session: Session, account_number: str) -> None:
        if not self.exists(session, account_number):
            raise LedgerError(
                ErrorKind.ACCOUNT_NOT_FOUND,
                f"Account {account_number} not found or inactive",
            )

    def find(
        self, session: Session, account_number: str,
        include_inactive: bool = False,
    ) -> Account:
        account = self.store.find_account(
            session, account_number, include_inactive=include_inactive
        )
        if account is None:
            raise LedgerError(
                ErrorKind.ACCOUNT_NOT_FOUND,
                f"Account {account_number} not found",
            )
        return account

