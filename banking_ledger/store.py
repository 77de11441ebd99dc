"""
Balance store — transactional access to accounts and the log.

The store is the only code that talks to the database. It
hands out sessions as units of work and offers the reads and
writes the ledger engine needs inside them. It knows nothing
about business rules beyond "an inactive account cannot be
locked for mutation".

Row locks: lock_and_read_balance issues SELECT ... FOR UPDATE.
The lock is held until the session commits or rolls back.
On SQLite, FOR UPDATE is a no-op and the engine-level
BEGIN IMMEDIATE (see models/base.py) serializes instead.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from sqlalchemy import select, update, or_, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from banking_ledger.config import Settings
from banking_ledger.models.account import Account
from banking_ledger.models.base import (
    Base,
    create_store_engine,
    create_session_factory,
)
from banking_ledger.models.ledger_entry import LedgerEntry
from banking_ledger.results import ErrorKind, LedgerError

logger = logging.getLogger(__name__)


class BalanceStore:
    """
    SQLAlchemy-backed balance store.

    Construct it from an Engine, or from Settings with
    BalanceStore.from_settings(). Each begin() returns a fresh
    Session that is one unit of work.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = create_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BalanceStore":
        return cls(create_store_engine(settings))

    # --- Lifecycle ---

    def create_schema(self) -> None:
        """Create all tables. Used in development and tests."""
        Base.metadata.create_all(bind=self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Store ping failed", exc_info=True)
            return False

    # --- Units of work ---

    def begin(self) -> Session:
        return self.session_factory()

    def commit(self, session: Session) -> None:
        session.commit()

    def abort(self, session: Session) -> None:
        """
        Roll back the unit of work.

        A rollback that itself fails (e.g. the connection is
        gone) leaves nothing committed, so the failure is
        logged and the caller's first error stands.
        """
        try:
            session.rollback()
        except SQLAlchemyError:
            logger.error("Rollback failed", exc_info=True)

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """
        Commit on normal exit, abort on any exception.

        The session is closed either way, returning its
        connection to the pool.
        """
        session = self.begin()
        try:
            yield session
            self.commit(session)
        except BaseException:
            self.abort(session)
            raise
        finally:
            session.close()

    # --- Reads and writes inside a unit of work ---

    def find_account(
        self, session: Session, account_number: str,
        include_inactive: bool = False,
    ) -> Account | None:
        query = select(Account).where(Account.account_number == account_number)
        if not include_inactive:
            query = query.where(Account.active.is_(True))
        return session.execute(query).scalar_one_or_none()

    def account_exists(
        self, session: Session, account_number: str,
        include_inactive: bool = False,
    ) -> bool:
        query = select(Account.id).where(Account.account_number == account_number)
        if not include_inactive:
            query = query.where(Account.active.is_(True))
        return session.execute(query.limit(1)).first() is not None

    def lock_and_read_balance(self, session: Session, account_number: str) -> Decimal:
        """
        Lock an active account row and return its balance.

        Raises LedgerError(ACCOUNT_NOT_FOUND) if there is no
        active account with that number.
        """
        balance = session.execute(
            select(Account.balance)
            .where(
                Account.account_number == account_number,
                Account.active.is_(True),
            )
            .with_for_update()
        ).scalar_one_or_none()

        if balance is None:
            raise LedgerError(
                ErrorKind.ACCOUNT_NOT_FOUND,
                f"Account {account_number} not found or inactive",
            )
        return Decimal(balance)

    def write_balance(
        self, session: Session, account_number: str, new_balance: Decimal
    ) -> None:
        session.execute(
            update(Account)
            .where(Account.account_number == account_number)
            .values(balance=new_balance)
            .execution_options(synchronize_session=False)
        )

    def insert_account(self, session: Session, account: Account) -> Account:
        session.add(account)
        session.flush()
        return account

    def set_active(self, session: Session, account_number: str, active: bool) -> None:
        session.execute(
            update(Account)
            .where(Account.account_number == account_number)
            .values(active=active)
            .execution_options(synchronize_session=False)
        )

    def append_ledger_entry(self, session: Session, entry: LedgerEntry) -> LedgerEntry:
        """Add an entry and flush so it gets its id."""
        session.add(entry)
        session.flush()
        return entry

    def select_entries(
        self, session: Session, account_number: str | None, limit: int
    ) -> list[LedgerEntry]:
        """Entries newest first, optionally touching one account."""
        query = select(LedgerEntry)
        if account_number is not None:
            query = query.where(or_(
                LedgerEntry.source_account == account_number,
                LedgerEntry.destination_account == account_number,
            ))
        query = query.order_by(
            LedgerEntry.created_at.desc(),
            LedgerEntry.id.desc(),
        ).limit(limit)
        return list(session.execute(query).scalars().all())

    def select_active_accounts(self, session: Session) -> list[Account]:
        return list(session.execute(
            select(Account)
            .where(Account.active.is_(True))
            .order_by(Account.account_number)
        ).scalars().all())

    # --- Read-only queries in their own short unit of work ---

    def query_accounts(self) -> list[Account]:
        """Active accounts ordered by account number."""
        with self.unit_of_work() as session:
            accounts = self.select_active_accounts(session)
            session.expunge_all()
        return accounts

    def query_transactions(
        self, account_number: str | None, limit: int
    ) -> list[LedgerEntry]:
        with self.unit_of_work() as session:
            entries = self.select_entries(session, account_number, limit)
            session.expunge_all()
        return entries

    def read_balance(self, account_number: str) -> Decimal:
        """Plain read of an active account's committed balance."""
        with self.unit_of_work() as session:
            balance = session.execute(
                select(Account.balance).where(
                    Account.account_number == account_number,
                    Account.active.is_(True),
                )
            ).scalar_one_or_none()

        if balance is None:
            raise LedgerError(
                ErrorKind.ACCOUNT_NOT_FOUND,
                f"Account {account_number} not found or inactive",
            )
        return Decimal(balance)
