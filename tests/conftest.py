"""Shared fixtures for the HTTP and validation tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api import ApiSettings
from app import create_app


@pytest.fixture
def settings() -> ApiSettings:
    """Tight limits so the limit checks are easy to trigger."""
    return ApiSettings(max_bound=10_000, max_factors=4, max_work=20_000)


@pytest.fixture
def client(settings: ApiSettings) -> TestClient:
    app = create_app(settings=settings)
    return TestClient(app)
