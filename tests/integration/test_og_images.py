"""
Integration tests for OG image generation against a running service.
Set OGP_SERVICE_URL (e.g. http://localhost:8000) to enable them; the service
needs real assets in its object store and a Playwright Chromium install.
"""

import os
import struct

import pytest
import httpx

OGP_SERVICE_URL = os.getenv("OGP_SERVICE_URL")

pytestmark = pytest.mark.skipif(not OGP_SERVICE_URL, reason="OGP_SERVICE_URL not set")


def png_size(content: bytes):
    # IHDR is the first chunk: width and height are big-endian at offset 16
    return struct.unpack(">II", content[16:24])


@pytest.mark.asyncio
async def test_og_image():
    """Test GET /image/{width}/{height}/{text}."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(f"{OGP_SERVICE_URL}/image/1200/630/%E6%A1%9C")

        assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG\r\n\x1a\n")
        assert png_size(response.content) == (1200, 630)


@pytest.mark.asyncio
@pytest.mark.parametrize("width,height", [(1, 1), (600, 315), (333, 777)])
async def test_og_image_dimensions(width, height):
    """PNG dimensions match the requested size."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(f"{OGP_SERVICE_URL}/image/{width}/{height}/hello")

        assert response.status_code == 200
        assert png_size(response.content) == (width, height)


@pytest.mark.asyncio
async def test_og_image_is_deterministic():
    """Identical requests produce identical bytes."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        url = f"{OGP_SERVICE_URL}/image/1200/630/12345678901234567890"
        first = await client.get(url)
        second = await client.get(url)

        assert first.content == second.content


@pytest.mark.asyncio
async def test_og_image_cache_headers():
    """Test that OG images have proper cache headers."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(f"{OGP_SERVICE_URL}/image/1200/630/cache")

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "max-age=604800"


@pytest.mark.asyncio
async def test_og_image_validation():
    """Malformed dimensions are rejected."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(f"{OGP_SERVICE_URL}/image/wide/630/x")

        assert response.status_code == 400
