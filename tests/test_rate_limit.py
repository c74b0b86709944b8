from fastapi import FastAPI
from fastapi.testclient import TestClient
from slowapi import Limiter
from slowapi.util import get_remote_address

from driftai.core.config import Settings
from driftai.middleware.rate_limit import setup_rate_limiting


def test_default_limit_is_100_per_15_minutes():
    assert Settings.model_fields["RATE_LIMIT_DEFAULT"].default == "100/15minutes"


def test_requests_over_the_limit_are_rejected():
    app = FastAPI()
    setup_rate_limiting(app, Limiter(key_func=get_remote_address, default_limits=["2/minute"]))

    @app.get("/ping")
    def ping():
        return {"ok": True}

    client = TestClient(app)
    assert [client.get("/ping").status_code for _ in range(3)] == [200, 200, 429]
