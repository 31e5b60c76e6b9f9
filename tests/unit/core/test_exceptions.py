"""Unit tests for HTTP exceptions and exception handlers.

Tests cover:
- Exception construction
- Error body shape for each handler
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from label_analyzer.core.exceptions import (
    BadRequestException,
    RateLimitException,
    ServiceUnavailableException,
    setup_exception_handlers,
)


pytestmark = pytest.mark.unit


class _Body(BaseModel):
    text: str


@pytest.fixture
def client() -> TestClient:
    """Create a client for an app whose routes raise each error kind."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/bad-request")
    async def bad_request() -> None:
        msg = "Label text must be a non-empty string"
        raise BadRequestException(msg)

    @app.get("/rate-limited")
    async def rate_limited() -> None:
        raise RateLimitException(retry_after=42)

    @app.get("/not-found")
    async def not_found() -> None:
        raise HTTPException(status_code=404, detail="Nothing here")

    @app.post("/validate")
    async def validate(body: _Body) -> dict[str, str]:
        return {"text": body.text}

    @app.get("/crash")
    async def crash() -> None:
        msg = "boom"
        raise RuntimeError(msg)

    return TestClient(app, raise_server_exceptions=False)


class TestExceptions:
    """Tests for exception construction."""

    def test_rate_limit_sets_retry_after_header(self) -> None:
        """Should carry Retry-After when a delay is known."""
        exc = RateLimitException(retry_after=10)

        assert exc.status_code == 429
        assert exc.headers == {"Retry-After": "10"}
        assert exc.retry_after == 10

    def test_rate_limit_without_delay(self) -> None:
        """Should omit the header when no delay is known."""
        assert RateLimitException().headers is None

    def test_service_unavailable_default_message(self) -> None:
        """Should default to a generic message."""
        exc = ServiceUnavailableException()

        assert exc.status_code == 503
        assert exc.message == "Service temporarily unavailable"


class TestExceptionHandlers:
    """Tests for the registered handlers."""

    def test_app_exception(self, client: TestClient) -> None:
        """Should render application exceptions as error bodies."""
        response = client.get("/bad-request")

        assert response.status_code == 400
        assert response.json() == {
            "error": "BAD_REQUEST",
            "message": "Label text must be a non-empty string",
        }

    def test_rate_limit_exception(self, client: TestClient) -> None:
        """Should include retry_after in both header and body."""
        response = client.get("/rate-limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.json()["retry_after"] == 42

    def test_http_exception(self, client: TestClient) -> None:
        """Should wrap Starlette HTTP exceptions."""
        response = client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {"error": "HTTP_ERROR", "message": "Nothing here"}

    def test_validation_error(self, client: TestClient) -> None:
        """Should list each validation problem with its field path."""
        response = client.post("/validate", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.text"

    def test_unhandled_exception(self, client: TestClient) -> None:
        """Should hide unexpected errors behind a generic 500."""
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json() == {
            "error": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred",
        }
