"""API tests with TestClient: status, stats, connect, disconnect, me."""

import base64

import pytest
from fastapi.testclient import TestClient


def _basic(email: str, password: str) -> dict:
    raw = base64.b64encode(f"{email}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {raw}"}


@pytest.fixture
def token(auth: dict) -> str:
    return auth["X-Token"]


def test_status(client: TestClient) -> None:
    """GET /status reports both stores alive."""
    r = client.get("/status")
    assert r.status_code == 200
    assert r.json() == {"redis": True, "db": True}


def test_stats(client: TestClient, token: str) -> None:
    """GET /stats counts users and files."""
    assert client.get("/stats").json() == {"users": 1, "files": 0}
    client.post("/files", json={"name": "docs", "type": "folder"}, headers={"X-Token": token})
    assert client.get("/stats").json() == {"users": 1, "files": 1}


def test_security_headers(client: TestClient) -> None:
    r = client.get("/status")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


def test_connect_success(client: TestClient) -> None:
    """GET /connect with the bootstrap user's Basic credentials returns a token."""
    r = client.get("/connect", headers=_basic("test@example.com", "testpass123"))
    assert r.status_code == 200
    assert set(r.json()) == {"token"}
    assert r.json()["token"]


def test_connect_unknown_user(client: TestClient) -> None:
    """No user matches: 401 with the generic body."""
    r = client.get("/connect", headers=_basic("a@b.com", "pw"))
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_connect_wrong_password_same_as_unknown_user(client: TestClient) -> None:
    r = client.get("/connect", headers=_basic("test@example.com", "wrong"))
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer abc"},
        {"Authorization": "Basic %%%"},
        {"Authorization": "Basic " + base64.b64encode(b"nocolon").decode("ascii")},
    ],
)
def test_connect_malformed_header(client: TestClient, headers: dict) -> None:
    r = client.get("/connect", headers=headers)
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_me_requires_token(client: TestClient) -> None:
    r = client.get("/users/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_me_with_token(client: TestClient, token: str) -> None:
    r = client.get("/users/me", headers={"X-Token": token})
    assert r.status_code == 200
    data = r.json()
    assert data["email"] == "test@example.com"
    assert data["id"]
    assert "password" not in data and "password_hash" not in data


def test_disconnect_revokes_token(client: TestClient, token: str) -> None:
    """Logout returns 204; the token is unusable afterwards, and a second logout is 401."""
    r = client.get("/disconnect", headers={"X-Token": token})
    assert r.status_code == 204
    assert r.content == b""
    assert client.get("/users/me", headers={"X-Token": token}).status_code == 401
    r = client.get("/disconnect", headers={"X-Token": token})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_disconnect_without_token(client: TestClient) -> None:
    assert client.get("/disconnect").status_code == 401
    assert client.get("/disconnect", headers={"X-Token": "nope"}).status_code == 401
