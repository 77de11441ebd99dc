"""
Operation results and error kinds.

Every ledger operation returns either Success(value) or
Failure(kind, message). Callers branch on result.ok (or use
isinstance) and must handle each ErrorKind explicitly; the
engine never signals a business outcome by raising.

LedgerError is the internal exception used to abort a unit of
work on a structural failure. It never escapes the engine.
"""

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """The closed set of reasons an operation can fail."""
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_ARGUMENT = "InvalidArgument"
    ACCOUNT_NOT_FOUND = "AccountNotFound"
    DUPLICATE_ACCOUNT = "DuplicateAccount"
    SAME_ACCOUNT = "SameAccount"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    NON_ZERO_BALANCE = "NonZeroBalance"
    STORE_UNAVAILABLE = "StoreUnavailable"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """
    A failed operation.

    entry_id is set when the attempt was recorded in the
    transaction log (insufficient funds); structural failures
    never reach the log and leave it None.
    """
    kind: ErrorKind
    message: str
    entry_id: int | None = None

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]


class LedgerError(ValueError):
    """Raised inside a unit of work to abort it with a given kind."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    def to_failure(self) -> Failure:
        return Failure(kind=self.kind, message=str(self))
