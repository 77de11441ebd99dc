"""
Banking Ledger — FastAPI Application.

This is the entry point for the application. create_app wires
settings into a store, the store into the ledger engine, and
registers all routers.

Run with:  banking-ledger
      or:  uvicorn banking_ledger.main:create_app --factory
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from banking_ledger.config import Settings, get_settings
from banking_ledger.logging_config import configure_logging
from banking_ledger.store import BalanceStore
from banking_ledger.services.ledger_engine import LedgerEngine
from banking_ledger.api.health import router as health_router
from banking_ledger.api.accounts import router as accounts_router
from banking_ledger.api.transactions import router as transactions_router


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = get_settings()

    configure_logging(settings.LOG_LEVEL)

    store = BalanceStore.from_settings(settings)
    if settings.AUTO_CREATE_SCHEMA:
        store.create_schema()

    ledger = LedgerEngine(
        store,
        default_history_limit=settings.DEFAULT_HISTORY_LIMIT,
        max_history_limit=settings.MAX_HISTORY_LIMIT,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Single-ledger banking engine with an append-only audit trail",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ledger = ledger

    # Register routers
    app.include_router(health_router)
    app.include_router(accounts_router)
    app.include_router(transactions_router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)
