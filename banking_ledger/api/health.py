"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

from fastapi import APIRouter, Depends

from banking_ledger.api.deps import get_ledger
from banking_ledger.services.ledger_engine import LedgerEngine

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(ledger: LedgerEngine = Depends(get_ledger)):
    """
    Return application health status including database connectivity.

    The database check executes a simple query to verify
    the connection is alive.
    """
    db_status = "healthy" if ledger.store.ping() else "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "banking-ledger",
        "database": db_status,
    }
