"""
Shared dependencies for the HTTP layer.

The API layer is thin: it handles HTTP concerns (status codes,
response formatting) and delegates all business logic to the
LedgerEngine stored on the application at startup.
"""

from fastapi import HTTPException, Request

from banking_ledger.results import ErrorKind, Failure, Result
from banking_ledger.services.ledger_engine import LedgerEngine
from banking_ledger.schemas.transaction import FailureResponse

STATUS_BY_KIND = {
    ErrorKind.INVALID_AMOUNT: 400,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.SAME_ACCOUNT: 400,
    ErrorKind.ACCOUNT_NOT_FOUND: 404,
    ErrorKind.DUPLICATE_ACCOUNT: 409,
    ErrorKind.NON_ZERO_BALANCE: 409,
    ErrorKind.INSUFFICIENT_FUNDS: 409,
    ErrorKind.STORE_UNAVAILABLE: 503,
}


def get_ledger(request: Request) -> LedgerEngine:
    """Provide the application's ledger engine to an endpoint."""
    return request.app.state.ledger


def unwrap(result: Result):
    """
    Return the success value or raise the matching HTTP error.

    The error body names the error kind, so clients can branch
    on it, and carries the log entry id for recorded failures.
    """
    if isinstance(result, Failure):
        body = FailureResponse(
            error=result.kind.value,
            message=result.message,
            entry_id=result.entry_id,
        )
        raise HTTPException(
            status_code=STATUS_BY_KIND[result.kind],
            detail=body.model_dump(),
        )
    return result.value
