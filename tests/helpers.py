"""Helpers for HTTP tests."""

from fastapi.testclient import TestClient


def use_session(client: TestClient, session_id: str | None) -> None:
    """Switch the client's session cookie."""
    client.cookies.clear()
    if session_id:
        client.cookies.set("sid", session_id)


def login(client: TestClient, identifier: str, password: str) -> str:
    """Log in and return the session id."""
    client.cookies.clear()
    response = client.post("/api/login", json={"login": identifier, "password": password})
    assert response.status_code == 200, response.text
    return response.cookies["sid"]
