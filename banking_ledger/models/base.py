"""
Database engine factory, session factory, and base model.

Every model inherits from Base. Engines are built from an
explicit Settings instance; there is no module-level engine,
so two stores pointing at different databases can live in
one process (tests do exactly that).
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from banking_ledger.config import Settings


# --- Base Model Class ---
# Every database model (Account, LedgerEntry) inherits from
# this class. SQLAlchemy uses it to track all models and
# generate the correct SQL for table creation.
class Base(DeclarativeBase):
    pass


def _enable_sqlite_write_locking(engine: Engine) -> None:
    """
    Make every SQLite transaction start with BEGIN IMMEDIATE.

    SQLite has no row-level locks and ignores FOR UPDATE. By
    default pysqlite also defers BEGIN until the first write,
    so two units of work could both read a balance before
    either writes it. Taking the database write lock up front
    serializes units of work instead; waiters block for up to
    the connection timeout.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        # Stop pysqlite from emitting its own BEGIN
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_store_engine(settings: Settings) -> Engine:
    """
    Build the SQLAlchemy engine for the configured database.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.
    """
    url = settings.DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=settings.DATABASE_ECHO,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.SQLITE_BUSY_TIMEOUT,
            },
        )
        _enable_sqlite_write_locking(engine)
        return engine

    return create_engine(
        url,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """
    Session factory bound to the given engine.

    autocommit=False means we explicitly control when changes
    are saved. autoflush=False means SQL is only sent when we
    flush or commit.
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )
