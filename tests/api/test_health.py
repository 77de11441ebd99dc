"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    response = client.get("/health")
    data = response.json()
    assert data["service"] == "banking-ledger"
    assert data["status"] == "healthy"


def test_health_check_reports_database_status(client):
    """
    The test database is a local SQLite file, so it should
    always answer.
    """
    response = client.get("/health")
    assert response.json()["database"] == "healthy"
