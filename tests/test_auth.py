from datetime import timedelta
from unittest.mock import patch

from driftai.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from driftai.db.dynamo import EmailTakenError


def test_password_hash_round_trip():
    hashed = get_password_hash("hemmelig")
    assert hashed != "hemmelig"
    assert verify_password("hemmelig", hashed)
    assert not verify_password("feil", hashed)
    assert not verify_password("hemmelig", "not-a-bcrypt-hash")


def test_token_carries_subject():
    payload = decode_access_token(create_access_token(data={"sub": "user-9"}))
    assert payload["sub"] == "user-9"
    assert payload["exp"] > payload["iat"]


def test_register_returns_token_and_user(client):
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_email.return_value = None
        dynamo.put_user.return_value = True
        response = client.post(
            "/api/auth/register",
            json={"email": "kari@example.no", "password": "hemmelig", "companyName": "Kari AS"},
        )

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "kari@example.no"
    assert body["user"]["company_name"] == "Kari AS"
    assert decode_access_token(body["token"])["sub"] == body["user"]["user_id"]

    stored = dynamo.put_user.call_args.args[0]
    assert stored["password_hash"] != "hemmelig"
    assert "tripletex_token" not in stored


def test_register_duplicate_email(client):
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_email.return_value = {"user_id": "user-1", "email": "kari@example.no"}
        response = client.post("/api/auth/register", json={"email": "kari@example.no", "password": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already exists"
    dynamo.put_user.assert_not_called()


def test_register_requires_password(client):
    response = client.post("/api/auth/register", json={"email": "kari@example.no"})
    assert response.status_code == 422


def test_register_storage_failure(client):
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_email.return_value = None
        dynamo.put_user.return_value = False
        response = client.post("/api/auth/register", json={"email": "kari@example.no", "password": "x"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Registration failed"


def test_login(client):
    user = {
        "user_id": "user-1",
        "email": "kari@example.no",
        "password_hash": get_password_hash("hemmelig"),
        "company_name": "Kari AS",
        "created_at": "2026-01-01T00:00:00",
    }
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_email.return_value = user
        ok = client.post("/api/auth/login", json={"email": "kari@example.no", "password": "hemmelig"})
        bad = client.post("/api/auth/login", json={"email": "kari@example.no", "password": "feil"})

    assert ok.status_code == 200
    assert ok.json()["user"] == {
        "user_id": "user-1",
        "email": "kari@example.no",
        "company_name": "Kari AS",
        "created_at": "2026-01-01T00:00:00",
    }
    assert "password_hash" not in ok.json()["user"]
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_email.return_value = None
        response = client.post("/api/auth/login", json={"email": "ola@example.no", "password": "x"})
    assert response.status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Token abc"}).status_code == 401


def test_me_rejects_bad_or_expired_token(client):
    expired = create_access_token(data={"sub": "user-1"}, expires_delta=timedelta(minutes=-1))
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 403
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 403


def test_me(client, auth_headers):
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_id.return_value = {"user_id": "user-1", "email": "kari@example.no"}
        response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "kari@example.no"
    dynamo.get_user_by_id.assert_called_once_with("user-1")


def test_register_loses_race_for_email(client):
    with patch("driftai.routers.auth.dynamo") as dynamo:
        dynamo.get_user_by_email.return_value = None
        dynamo.put_user.side_effect = EmailTakenError("kari@example.no")
        response = client.post("/api/auth/register", json={"email": "kari@example.no", "password": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already exists"
