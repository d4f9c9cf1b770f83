"""Bearer-token authorization on protected routes."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.api.deps import extract_bearer_token
from app.core.errors import TokenMissing
from app.core.tokens import TokenService
from conftest import TEST_SECRET_KEY, login, make_user


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"
    assert extract_bearer_token("bearer   abc") == "abc"


@pytest.mark.parametrize("header", [None, "", "garbage", "Bearer", "   "])
def test_extract_bearer_token_missing(header):
    with pytest.raises(TokenMissing):
        extract_bearer_token(header)


def test_no_authorization_header(client: TestClient):
    resp = client.get("/recipes")
    assert resp.status_code == 401
    assert resp.json()["error"] == "TokenMissing"
    assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_malformed_authorization_header(client: TestClient):
    resp = client.get("/recipes", headers={"Authorization": "garbage"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "TokenMissing"


def test_invalid_token(client: TestClient):
    resp = client.get("/recipes", headers={"Authorization": "Bearer not.a.real.token"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "TokenMalformed"


def test_expired_token(client: TestClient, db, hasher):
    user = make_user(db, hasher, "late")
    two_hours_ago = datetime.now(timezone.utc) - timedelta(hours=2)
    stale = TokenService(secret_key=TEST_SECRET_KEY, clock=lambda: two_hours_ago)
    headers = {"Authorization": f"Bearer {stale.issue(user.id)}"}

    resp = client.get("/recipes", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["error"] == "TokenExpired"


def test_token_from_another_key(client: TestClient, db, hasher):
    user = make_user(db, hasher, "forged")
    forged = TokenService(secret_key="not-the-server-key")
    resp = client.get("/recipes", headers={"Authorization": f"Bearer {forged.issue(user.id)}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "TokenMalformed"


def test_token_for_deleted_user_cannot_load_profile(client: TestClient, tokens):
    headers = {"Authorization": f"Bearer {tokens.issue(uuid.uuid4())}"}
    resp = client.get("/users/me", headers=headers)
    assert resp.status_code == 401


def test_handler_not_called_on_auth_failure(client: TestClient, monkeypatch):
    from app import crud

    def fail(*args, **kwargs):
        raise AssertionError("handler must not run")

    monkeypatch.setattr(crud, "create_user_recipe", fail)
    resp = client.post("/recipes", json={"title": "Soup"}, headers={"Authorization": "Bearer bad"})
    assert resp.status_code == 401


def test_valid_token_reaches_handler(client: TestClient, db, hasher):
    make_user(db, hasher, "valid")
    resp = client.get("/recipes", headers=login(client, "valid"))
    assert resp.status_code == 200
    assert resp.json() == []
