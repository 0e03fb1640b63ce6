"""
Test configuration and fixtures for ThemeColor tests.
"""
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

# Import the main app
from main import app
from themecolor.api.theme import get_image_fetcher
from themecolor.services.imaging import ImageFetcher

ASSETS_DIR = Path(__file__).parent / "assets"


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def mock_upstream():
    """
    Route image fetches through an httpx.MockTransport.

    Yields an installer taking a request handler; the handler receives every
    upstream httpx.Request and returns the httpx.Response to serve.
    """
    def install(handler):
        transport = httpx.MockTransport(handler)
        app.dependency_overrides[get_image_fetcher] = lambda: ImageFetcher(transport=transport)

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def two_by_two_png() -> bytes:
    """Checked-in 2x2 PNG with known pixel values."""
    return (ASSETS_DIR / "two_by_two.png").read_bytes()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from themecolor.utils.metrics import reset_metrics
    reset_metrics()
