"""
Open Graph (OG) Image Generation Service.
Runs the composition pipeline: assets -> layout tree -> SVG -> PNG.
"""
import asyncio
from typing import Optional

from ..core.config import settings
from ..storage.object_store import create_object_store
from ..utils.debug import print_step
from . import raster_encoder, vector_renderer
from .asset_cache import AssetCache, CacheState
from .layout import RenderRequest, build_layout

_asset_cache: Optional[AssetCache] = None


def get_asset_cache() -> AssetCache:
    """Process-wide asset cache, created on first use."""
    global _asset_cache
    if _asset_cache is None:
        _asset_cache = AssetCache(
            create_object_store(settings),
            font_key=settings.FONT_OBJECT_KEY,
            background_key=settings.BACKGROUND_OBJECT_KEY,
        )
    return _asset_cache


class OGService:
    """Service for generating Open Graph images for social media sharing."""

    def __init__(self, asset_cache: AssetCache):
        self.asset_cache = asset_cache

    async def generate_image(self, width: int, height: int, text: str) -> bytes:
        """
        Generate a preview image.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            text: Decoded text to draw

        Returns:
            PNG image bytes of exactly width x height pixels

        Raises:
            InvalidRenderRequest: If the dimensions are not positive integers
            AssetUnavailable: If the font or background is missing from storage
            RenderError: If the layout cannot be rendered to SVG
            EncodeError: If the SVG cannot be rasterized
        """
        request = RenderRequest(width=width, height=height, text=text)
        print_step("OG Image Generation", {
            "width": width,
            "height": height,
            "text_length": len(text)
        }, "input")

        cold = self.asset_cache.state is CacheState.EMPTY
        if cold:
            print_step("Asset Fetch", {
                "font": self.asset_cache.font_key,
                "background": self.asset_cache.background_key
            }, "input")
        assets = await self.asset_cache.get_or_fetch()
        if cold:
            print_step("Asset Fetch Complete", {
                "font_bytes": len(assets.font_bytes),
                "background_uri_length": len(assets.background_data_uri)
            }, "output")
        layout = build_layout(request, assets)

        # FreeType work is CPU bound
        graphic = await asyncio.to_thread(
            vector_renderer.render, layout, assets.font_bytes, request.width, request.height
        )
        print_step("SVG Rendered", {"svg_length": len(graphic.svg)}, "info")

        png_bytes = await raster_encoder.encode(graphic)
        print_step("OG Image Generated", {
            "image_size_bytes": len(png_bytes)
        }, "output")
        return png_bytes


def get_og_service() -> OGService:
    return OGService(get_asset_cache())
