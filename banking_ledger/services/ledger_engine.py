"""
Ledger engine — the core of the banking system.

Each public operation is one unit of work against the balance
store: open a session, read and lock what it needs, validate,
write balances and the log entry, then commit or roll back as
a whole. No operation spans two units of work and no lock
outlives its operation.

This service enforces the fundamental rules:
1. Balances never go negative
2. Every decided mutation leaves exactly one log entry, in
   the same unit of work as the balance change
3. Refused withdrawals and transfers (insufficient funds) are
   committed as FAILED entries, not rolled back
4. Two-account operations lock rows in account-number order

Operations return Success or Failure (see results.py). They do
not raise for business or structural failures, and any store
error becomes Failure(STORE_UNAVAILABLE) after rollback.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from banking_ledger.models.account import Account, OWNER_NAME_MAX_LENGTH
from banking_ledger.results import (
    ErrorKind,
    Failure,
    LedgerError,
    Result,
    Success,
)
from banking_ledger.schemas.account import AccountView
from banking_ledger.schemas.ledger import LedgerEntryView
from banking_ledger.schemas.transaction import BalanceChange, TransferOutcome
from banking_ledger.services.account_registry import AccountRegistry
from banking_ledger.services.transaction_log import (
    TransactionLog,
    INSUFFICIENT_FUNDS_REASON,
)
from banking_ledger.store import BalanceStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

CENT = Decimal("0.01")
# Largest value a Numeric(15, 2) column holds
MAX_BALANCE = Decimal("9999999999999.99")

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 500


def parse_amount(amount, allow_zero: bool = False) -> Decimal:
    """
    Coerce an amount to a two-place Decimal.

    Accepts Decimal, int, str, and float (converted through
    str so 0.1 stays 0.1). Raises LedgerError(INVALID_AMOUNT)
    for anything non-numeric, non-finite, negative, zero
    (unless allow_zero), finer than a cent, or too large.
    """
    if isinstance(amount, bool):
        raise LedgerError(ErrorKind.INVALID_AMOUNT, f"Invalid amount: {amount!r}")
    if isinstance(amount, float):
        amount = str(amount)

    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise LedgerError(ErrorKind.INVALID_AMOUNT, f"Invalid amount: {amount!r}")

    if not value.is_finite():
        raise LedgerError(ErrorKind.INVALID_AMOUNT, f"Invalid amount: {amount!r}")
    if value < 0 or (value == 0 and not allow_zero):
        raise LedgerError(
            ErrorKind.INVALID_AMOUNT, "Amount must be greater than zero"
        )
    if value > MAX_BALANCE:
        raise LedgerError(
            ErrorKind.INVALID_AMOUNT, f"Amount {value} exceeds {MAX_BALANCE}"
        )

    cents = value.quantize(CENT)
    if cents != value:
        raise LedgerError(
            ErrorKind.INVALID_AMOUNT,
            f"Amount {value} has more than two decimal places",
        )
    return cents


def _check_ceiling(account_number: str, new_balance: Decimal) -> None:
    if new_balance > MAX_BALANCE:
        raise LedgerError(
            ErrorKind.INVALID_AMOUNT,
            f"Account {account_number} balance would exceed {MAX_BALANCE}",
        )


class LedgerEngine:
    """
    All balance mutations pass through this service.

    The engine is given its store at construction. It holds no
    connection state of its own, so one instance can serve any
    number of concurrent callers; each call gets its own
    session from the store.
    """

    def __init__(
        self,
        store: BalanceStore,
        default_history_limit: int = DEFAULT_HISTORY_LIMIT,
        max_history_limit: int = MAX_HISTORY_LIMIT,
    ):
        self.store = store
        self.registry = AccountRegistry(store)
        self.log = TransactionLog(store)
        self.default_history_limit = default_history_limit
        self.max_history_limit = max_history_limit

    # --- Unit-of-work runner ---

    def _execute(
        self, operation: str, work: Callable[[Session], Result[T]]
    ) -> Result[T]:
        """
        Run work in one unit of work.

        work returns a Result. Whatever it returns is committed,
        including a Failure that carries a recorded entry. A
        LedgerError or store error rolls everything back.
        """
        session = self.store.begin()
        try:
            result = work(session)
            self.store.commit(session)
        except LedgerError as exc:
            self.store.abort(session)
            logger.warning("%s rejected (%s): %s", operation, exc.kind.value, exc)
            return exc.to_failure()
        except SQLAlchemyError:
            self.store.abort(session)
            return self._store_failure(operation)
        finally:
            session.close()

        return result

    @staticmethod
    def _store_failure(operation: str) -> Failure:
        logger.exception("%s aborted: store failure", operation)
        return Failure(
            kind=ErrorKind.STORE_UNAVAILABLE,
            message="The ledger store is unavailable; no changes were made",
        )

    # --- Account lifecycle ---

    def create_account(
        self, account_number: str, owner_name: str,
        initial_balance=Decimal("0"),
    ) -> Result[AccountView]:
        """
        Open an account, booking any initial balance as a deposit.

        The duplicate check runs inside the unit of work. If a
        concurrent creator wins the race anyway, the unique
        constraint rejects our insert and the result is still
        DuplicateAccount.
        """

        def work(session: Session) -> Result[AccountView]:
            number = self.registry.normalize(account_number)
            self.registry.validate_new_number(number)
            owner = owner_name.strip() if isinstance(owner_name, str) else ""
            if not owner or len(owner) > OWNER_NAME_MAX_LENGTH:
                raise LedgerError(
                    ErrorKind.INVALID_ARGUMENT,
                    f"Owner name must be 1 to {OWNER_NAME_MAX_LENGTH} characters",
                )
            opening = parse_amount(initial_balance, allow_zero=True)

            if self.registry.is_registered(session, number):
                raise LedgerError(
                    ErrorKind.DUPLICATE_ACCOUNT, f"Account {number} already exists"
                )

            account = Account(
                account_number=number,
                owner_name=owner,
                balance=opening,
                active=True,
            )
            try:
                self.store.insert_account(session, account)
            except IntegrityError:
                raise LedgerError(
                    ErrorKind.DUPLICATE_ACCOUNT, f"Account {number} already exists"
                )

            if opening > 0:
                self.log.record_opening_deposit(session, number, opening)

            logger.info("Account %s created for %s with %s", number, owner, opening)
            return Success(AccountView.model_validate(account))

        return self._execute("create_account", work)

    def deactivate_account(self, account_number: str) -> Result[AccountView]:
        """
        Mark an account inactive. Only allowed at a zero balance.

        The row is locked first, so a concurrent deposit cannot
        land between the balance check and the flag change.
        """

        def work(session: Session) -> Result[AccountView]:
            number = self.registry.normalize(account_number)
            balance = self.store.lock_and_read_balance(session, number)
            if balance != 0:
                raise LedgerError(
                    ErrorKind.NON_ZERO_BALANCE,
                    f"Account {number} still holds {balance}; "
                    f"it can only be deactivated at zero",
                )

            self.store.set_active(session, number, False)
            account = self.registry.find(session, number, include_inactive=True)

            logger.info("Account %s deactivated", number)
            return Success(AccountView.model_validate(account))

        return self._execute("deactivate_account", work)

    # --- Balance mutations ---

    def deposit(self, account_number: str, amount) -> Result[BalanceChange]:
        def work(session: Session) -> Result[BalanceChange]:
            number = self.registry.normalize(account_number)
            value = parse_amount(amount)
            self.registry.require_active(session, number)

            before = self.store.lock_and_read_balance(session, number)
            after = before + value
            _check_ceiling(number, after)

            self.store.write_balance(session, number, after)
            entry = self.log.record_deposit(session, number, value, before, after)

            logger.info("Deposit %s to %s: %s -> %s", value, number, before, after)
            return Success(BalanceChange(
                account_number=number,
                previous_balance=before,
                new_balance=after,
                entry_id=entry.id,
            ))

        return self._execute("deposit", work)

    def withdraw(self, account_number: str, amount) -> Result[BalanceChange]:
        """
        Withdraw from an account.

        On insufficient funds the attempt is logged as FAILED
        with an unchanged balance, the unit of work commits,
        and the caller gets Failure(INSUFFICIENT_FUNDS) with
        the id of that entry.
        """

        def work(session: Session) -> Result[BalanceChange]:
            number = self.registry.normalize(account_number)
            value = parse_amount(amount)
            self.registry.require_active(session, number)

            before = self.store.lock_and_read_balance(session, number)

            if before < value:
                entry = self.log.record_withdrawal(
                    session, number, value, before, before,
                    failure_reason=INSUFFICIENT_FUNDS_REASON,
                )
                logger.warning(
                    "Withdrawal of %s from %s refused: balance %s",
                    value, number, before,
                )
                return Failure(
                    kind=ErrorKind.INSUFFICIENT_FUNDS,
                    message=(
                        f"Insufficient funds in {number}: "
                        f"balance={before}, requested={value}"
                    ),
                    entry_id=entry.id,
                )

            after = before - value
            self.store.write_balance(session, number, after)
            entry = self.log.record_withdrawal(session, number, value, before, after)

            logger.info("Withdrawal %s from %s: %s -> %s", value, number, before, after)
            return Success(BalanceChange(
                account_number=number,
                previous_balance=before,
                new_balance=after,
                entry_id=entry.id,
            ))

        return self._execute("withdraw", work)

    def transfer(
        self, source_account: str, destination_account: str, amount
    ) -> Result[TransferOutcome]:
        """
        Move funds between two accounts.

        Locks are always taken in ascending account-number
        order, whichever side is the source. Two transfers
        running in opposite directions between the same pair
        therefore queue on the same first lock instead of each
        holding one and waiting for the other.
        """

        def work(session: Session) -> Result[TransferOutcome]:
            source = self.registry.normalize(source_account)
            destination = self.registry.normalize(destination_account)
            value = parse_amount(amount)
            if source == destination:
                raise LedgerError(
                    ErrorKind.SAME_ACCOUNT, "Cannot transfer to the same account"
                )

            lock_order = sorted((source, destination))
            for number in lock_order:
                self.registry.require_active(session, number)

            balances = {}
            for number in lock_order:
                balances[number] = self.store.lock_and_read_balance(session, number)

            source_before = balances[source]
            destination_before = balances[destination]

            if source_before < value:
                entry = self.log.record_transfer(
                    session, source, destination, value,
                    source_before, source_before,
                    destination_before, destination_before,
                    failure_reason=INSUFFICIENT_FUNDS_REASON,
                )
                logger.warning(
                    "Transfer of %s from %s to %s refused: balance %s",
                    value, source, destination, source_before,
                )
                return Failure(
                    kind=ErrorKind.INSUFFICIENT_FUNDS,
                    message=(
                        f"Insufficient funds in {source}: "
                        f"balance={source_before}, requested={value}"
                    ),
                    entry_id=entry.id,
                )

            source_after = source_before - value
            destination_after = destination_before + value
            _check_ceiling(destination, destination_after)

            self.store.write_balance(session, source, source_after)
            self.store.write_balance(session, destination, destination_after)
            entry = self.log.record_transfer(
                session, source, destination, value,
                source_before, source_after,
                destination_before, destination_after,
            )

            logger.info(
                "Transfer %s from %s to %s: %s -> %s, %s -> %s",
                value, source, destination,
                source_before, source_after,
                destination_before, destination_after,
            )
            return Success(TransferOutcome(
                source=BalanceChange(
                    account_number=source,
                    previous_balance=source_before,
                    new_balance=source_after,
                ),
                destination=BalanceChange(
                    account_number=destination,
                    previous_balance=destination_before,
                    new_balance=destination_after,
                ),
                entry_id=entry.id,
            ))

        return self._execute("transfer", work)

    # --- Read-only projections ---

    def get_balance(self, account_number: str) -> Result[Decimal]:
        try:
            number = self.registry.normalize(account_number)
            return Success(self.store.read_balance(number))
        except LedgerError as exc:
            return exc.to_failure()
        except SQLAlchemyError:
            return self._store_failure("get_balance")

    def get_account(self, account_number: str) -> Result[AccountView]:
        """Look up an account, including deactivated ones."""

        def work(session: Session) -> Result[AccountView]:
            number = self.registry.normalize(account_number)
            account = self.registry.find(session, number, include_inactive=True)
            return Success(AccountView.model_validate(account))

        return self._execute("get_account", work)

    def list_accounts(self) -> Result[list[AccountView]]:
        """Active accounts ordered by account number."""
        try:
            accounts = self.store.query_accounts()
        except SQLAlchemyError:
            return self._store_failure("list_accounts")
        return Success([AccountView.model_validate(a) for a in accounts])

    def list_transactions(
        self, account_number: str | None = None, limit: int | None = None
    ) -> Result[list[LedgerEntryView]]:
        """
        Log entries newest first.

        With an account number, only entries where it is the
        source or the destination. An unknown or blank account
        number simply has no entries.
        """
        if limit is None:
            limit = self.default_history_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            return Failure(
                kind=ErrorKind.INVALID_ARGUMENT,
                message="limit must be a positive integer",
            )
        limit = min(limit, self.max_history_limit)

        number = None
        if account_number is not None:
            try:
                number = self.registry.normalize(account_number)
            except LedgerError as exc:
                return exc.to_failure()
            if not number:
                return Success([])

        try:
            entries = self.store.query_transactions(number, limit)
        except SQLAlchemyError:
            return self._store_failure("list_transactions")
        return Success([self.log.to_view(entry) for entry in entries])
