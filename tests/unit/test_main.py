"""Unit tests for application entry point.

Tests cover:
- Application instance creation
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI


pytestmark = pytest.mark.unit


class TestApplicationInstance:
    """Tests for main application instance."""

    def test_app_is_fastapi_instance(self) -> None:
        """Test that app is a FastAPI instance."""
        from label_analyzer.main import app

        assert isinstance(app, FastAPI)

    def test_app_has_title_and_version(self) -> None:
        """Test that app has a title and version configured."""
        from label_analyzer.main import app

        assert app.title
        assert app.version
