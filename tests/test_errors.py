"""
Tests for error mapping when the database misbehaves.

These tests verify:
  - A failing database call yields 500 with a generic, endpoint-specific
    message and no internal detail in the body
  - The underlying error is logged server-side
  - Validation failures return 400 without touching the database
  - Unexpected exceptions are still turned into a 500 JSON response
"""

import logging

from httpx import AsyncClient, ASGITransport

from auth_lookup.database import get_db
from auth_lookup.main import app
from auth_lookup.services import document_service


class TestDatabaseFailures:
    """Every endpoint downgrades database errors to a generic 500."""

    async def test_register_database_error(self, failing_client, caplog):
        with caplog.at_level(logging.ERROR):
            response = await failing_client.post(
                "/register", json={"email": "a@x.com", "password": "secret"}
            )
        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error during registration."
        assert "server closed the connection" not in response.text
        assert "Error during registration" in caplog.text
        assert "secret" not in caplog.text

    async def test_login_database_error(self, failing_client, caplog):
        with caplog.at_level(logging.ERROR):
            response = await failing_client.post(
                "/login", json={"email": "a@x.com", "password": "secret"}
            )
        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error during login."
        assert "server closed the connection" not in response.text
        assert "Error during login" in caplog.text

    async def test_document_database_error(self, failing_client):
        response = await failing_client.get("/documents/US/passport")
        assert response.status_code == 500
        assert response.json()["message"] == (
            "Internal server error fetching document details."
        )


class TestValidationSkipsDatabase:
    """Missing fields are rejected before any database call."""

    async def test_register_missing_field(self, failing_client, failing_session):
        response = await failing_client.post("/register", json={"email": "a@x.com"})
        assert response.status_code == 400
        assert failing_session.calls == []

    async def test_login_missing_field(self, failing_client, failing_session):
        response = await failing_client.post("/login", json={"password": "secret"})
        assert response.status_code == 400
        assert failing_session.calls == []


async def test_unexpected_exception_becomes_500(monkeypatch, caplog):
    """An exception nothing else handles still produces a JSON 500."""

    async def broken_lookup(**kwargs):
        raise RuntimeError("boom")

    async def override_get_db():
        yield None

    monkeypatch.setattr(document_service, "get_document", broken_lookup)
    app.dependency_overrides[get_db] = override_get_db

    # raise_app_exceptions stays on: the error must not escape the app
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            with caplog.at_level(logging.ERROR):
                response = await ac.get("/documents/US/passport")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {
        "message": "Internal server error.",
        "error_type": "internal_error",
    }
    assert "boom" not in response.text
    assert "Unhandled error on GET /documents/US/passport" in caplog.text
