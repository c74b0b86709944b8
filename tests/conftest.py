"""Shared fixtures for the API tests."""
import pytest
from fastapi.testclient import TestClient

from driftai.core.security import create_access_token
from driftai.main import app
from driftai.middleware.rate_limit import limiter


@pytest.fixture
def client():
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def auth_headers():
    token = create_access_token(data={"sub": "user-1"})
    return {"Authorization": f"Bearer {token}"}
