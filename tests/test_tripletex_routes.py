from unittest.mock import patch

from driftai.services.tripletex import TripletexError


def test_setup_saves_working_token(client, auth_headers):
    with patch("driftai.routers.tripletex.TripletexClient") as client_cls, \
            patch("driftai.routers.tripletex.dynamo") as dynamo:
        client_cls.return_value.get_accounts.return_value = {"values": []}
        dynamo.set_tripletex_token.return_value = True
        response = client.post("/api/tripletex/setup", json={"sessionToken": "abc"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    client_cls.assert_called_once_with("abc")
    dynamo.set_tripletex_token.assert_called_once_with("user-1", "abc")


def test_setup_rejects_invalid_token(client, auth_headers):
    with patch("driftai.routers.tripletex.TripletexClient") as client_cls, \
            patch("driftai.routers.tripletex.dynamo") as dynamo:
        client_cls.return_value.get_accounts.side_effect = TripletexError(401)
        response = client.post("/api/tripletex/setup", json={"sessionToken": "bad"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid Tripletex token"
    dynamo.set_tripletex_token.assert_not_called()


def test_setup_requires_token_field(client, auth_headers):
    response = client.post("/api/tripletex/setup", json={}, headers=auth_headers)
    assert response.status_code == 422
