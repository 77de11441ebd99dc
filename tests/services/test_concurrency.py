"""
Concurrency tests for the LedgerEngine.

Many threads share one engine. Each operation runs in its own
unit of work on its own connection, so these tests check that
no update is lost, no balance goes negative, and opposite
transfers between the same pair of accounts all complete.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from banking_ledger.models.enums import EntryStatus
from banking_ledger.results import ErrorKind

WORKERS = 8


def run_all(calls):
    """Run zero-argument callables on a thread pool and return their results."""
    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [pool.submit(call) for call in calls]
        return [future.result() for future in futures]


def test_opposite_transfers_all_complete(ledger):
    ledger.create_account("A", "Ana Lopez", Decimal("1000.00"))
    ledger.create_account("B", "Ben Ortiz", Decimal("1000.00"))

    calls = []
    for _ in range(50):
        calls.append(lambda: ledger.transfer("A", "B", Decimal("10.00")))
        calls.append(lambda: ledger.transfer("B", "A", Decimal("10.00")))

    results = run_all(calls)

    assert all(result.ok for result in results), [
        r for r in results if not r.ok
    ]
    assert ledger.get_balance("A").value == Decimal("1000.00")
    assert ledger.get_balance("B").value == Decimal("1000.00")

    entries = ledger.list_transactions(limit=500).value
    assert len(entries) == 2 + 100
    assert all(e.status == EntryStatus.SUCCESS for e in entries)


def test_concurrent_deposits_lose_no_updates(ledger):
    ledger.create_account("A", "Ana Lopez")

    results = run_all([
        lambda: ledger.deposit("A", Decimal("1.25")) for _ in range(40)
    ])

    assert all(result.ok for result in results)
    assert ledger.get_balance("A").value == Decimal("50.00")

    # Every recorded before/after pair must chain without gaps
    entries = ledger.list_transactions("A", limit=500).value
    afters = sorted(e.destination.balance_after for e in entries)
    befores = sorted(e.destination.balance_before for e in entries)
    assert befores[0] == Decimal("0")
    assert afters[-1] == Decimal("50.00")
    assert befores[1:] == afters[:-1]


def test_concurrent_withdrawals_never_overdraw(ledger):
    ledger.create_account("A", "Ana Lopez", Decimal("100.00"))

    results = run_all([
        lambda: ledger.withdraw("A", Decimal("10.00")) for _ in range(20)
    ])

    succeeded = [r for r in results if r.ok]
    refused = [r for r in results if not r.ok]
    assert len(succeeded) == 10
    assert len(refused) == 10
    assert all(r.kind == ErrorKind.INSUFFICIENT_FUNDS for r in refused)
    assert all(r.entry_id is not None for r in refused)
    assert ledger.get_balance("A").value == Decimal("0")

    failed = [
        e for e in ledger.list_transactions("A", limit=500).value
        if e.status == EntryStatus.FAILED
    ]
    assert len(failed) == 10
    assert all(e.source.balance_before == Decimal("0") for e in failed)
