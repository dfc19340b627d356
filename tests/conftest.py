"""
Pytest configuration and fixtures for OGP Service tests.
"""
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from ogp_service.main import app
from ogp_service.services.asset_cache import AssetCache, Assets, to_png_data_uri
from ogp_service.services.og_service import OGService, get_og_service
from tests.fakes import (
    BACKGROUND_KEY,
    BACKGROUND_PNG,
    FAKE_FONT,
    FAKE_PNG,
    FONT_KEY,
    FakeFace,
    FakeObjectStore,
)


@pytest.fixture
def fake_face():
    """Patch FreeType face loading with FakeFace."""
    with patch("ogp_service.services.vector_renderer.freetype.Face", FakeFace):
        yield FakeFace


@pytest.fixture
def mock_playwright():
    """Mock Playwright for testing."""
    with patch('ogp_service.services.raster_encoder.async_playwright') as mock_playwright:
        mock_browser = AsyncMock()
        mock_page = AsyncMock()

        mock_page.screenshot = AsyncMock(return_value=FAKE_PNG)
        mock_browser.new_page = AsyncMock(return_value=mock_page)
        mock_browser.close = AsyncMock()

        mock_playwright.return_value.__aenter__.return_value.chromium.launch = AsyncMock(return_value=mock_browser)

        yield {
            'playwright': mock_playwright,
            'browser': mock_browser,
            'page': mock_page,
            'png': FAKE_PNG
        }


@pytest.fixture
def object_store():
    return FakeObjectStore({FONT_KEY: FAKE_FONT, BACKGROUND_KEY: BACKGROUND_PNG})


@pytest.fixture
def asset_cache(object_store):
    return AssetCache(object_store, font_key=FONT_KEY, background_key=BACKGROUND_KEY)


@pytest.fixture
def assets():
    return Assets(font_bytes=FAKE_FONT, background_data_uri=to_png_data_uri(BACKGROUND_PNG))


@pytest.fixture
def client(asset_cache):
    """Test client for FastAPI application backed by the in-memory store."""
    app.dependency_overrides[get_og_service] = lambda: OGService(asset_cache)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_og_service, None)
