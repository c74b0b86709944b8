from unittest.mock import patch

from botocore.exceptions import ClientError


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to DriftAI API"}


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "OK"
    assert "timestamp" in body


def test_status_healthy(client):
    with patch("driftai.routers.health.dynamo") as dynamo:
        response = client.get("/api/status")

    body = response.json()
    assert body["overall_status"] == "healthy"
    assert body["services"]["dynamodb"]["connected"] is True
    dynamo.users_table.scan.assert_called_once_with(Limit=1)


def test_status_degraded(client):
    error = ClientError({"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "Scan")
    with patch("driftai.routers.health.dynamo") as dynamo:
        dynamo.analyses_table.scan.side_effect = error
        body = client.get("/api/status").json()

    assert body["overall_status"] == "degraded"
    assert body["services"]["dynamodb"]["tables"]["analyses"]["status"] == "error"
    assert body["services"]["dynamodb"]["tables"]["users"]["status"] == "accessible"
