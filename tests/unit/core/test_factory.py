"""Unit tests for application factory.

Tests cover:
- create_app function
- Middleware setup
- Router setup
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.testclient import TestClient

from label_analyzer.core.config import Settings
from label_analyzer.core.middleware import LoggingMiddleware, RequestIDMiddleware
from label_analyzer.factory import create_app


pytestmark = pytest.mark.unit


def _middleware_classes(app: FastAPI) -> list[type]:
    return [middleware.cls for middleware in app.user_middleware]


class TestCreateApp:
    """Tests for create_app function."""

    def test_creates_fastapi_instance(self) -> None:
        """Should create a FastAPI instance."""
        settings = Settings(APP_ENV="test")

        app = create_app(settings)

        assert isinstance(app, FastAPI)
        assert app.title == settings.app.name
        assert app.version == settings.app.version

    def test_stores_settings_in_state(self) -> None:
        """Should store settings in app state."""
        settings = Settings(APP_ENV="test")

        app = create_app(settings)

        assert app.state.settings is settings

    def test_disables_docs_in_production(self) -> None:
        """Should disable docs endpoints in production."""
        app = create_app(Settings(APP_ENV="production"))

        assert app.docs_url is None
        assert app.redoc_url is None
        assert app.openapi_url is None

    def test_enables_docs_outside_production(self) -> None:
        """Should expose docs in development."""
        app = create_app(Settings(APP_ENV="development"))

        assert app.docs_url == "/docs"


class TestSetupMiddleware:
    """Tests for the middleware stack."""

    def test_request_id_is_outermost(self) -> None:
        """Should run request ID binding before request logging."""
        app = create_app(Settings(APP_ENV="test"))

        classes = _middleware_classes(app)

        assert classes[0] is RequestIDMiddleware
        assert classes[1] is LoggingMiddleware
        assert CORSMiddleware not in classes

    def test_adds_cors_when_origins_configured(self) -> None:
        """Should add CORS only when origins are configured."""
        settings = Settings(
            APP_ENV="test", api={"cors_origins": ["http://localhost:3000"]}
        )

        app = create_app(settings)

        assert CORSMiddleware in _middleware_classes(app)


class TestSetupRouters:
    """Tests for router mounting."""

    def test_mounts_v1_routes_under_prefix(self) -> None:
        """Should mount the analysis and health routes under the v1 prefix."""
        app = create_app(Settings(APP_ENV="test"))

        paths = {route.path for route in app.routes}

        assert "/api/v1/label-analyzer/analyze" in paths
        assert "/api/v1/label-analyzer/analyze/stream" in paths
        assert "/api/v1/label-analyzer/parse" in paths
        assert "/api/v1/label-analyzer/health" in paths
        assert "/api/v1/label-analyzer/ready" in paths

    def test_root_returns_service_info(self) -> None:
        """Should describe the service at the root path."""
        settings = Settings(APP_ENV="test")
        client = TestClient(create_app(settings))

        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {
            "service": settings.app.name,
            "version": settings.app.version,
            "docs": "/docs",
        }
