"""
PNG rasterization of vector graphics.
Uses Playwright (headless Chromium) so SVG filters and image fitting render
exactly as a browser draws them.
"""
import xml.etree.ElementTree as ET

from playwright.async_api import async_playwright, Error as PlaywrightError

from ..core.errors import EncodeError
from .vector_renderer import VectorGraphic

_SVG_TAG = "{http://www.w3.org/2000/svg}svg"

_BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
    '--font-render-hinting=none',
]

_PAGE_TEMPLATE = (
    '<!DOCTYPE html><html><head><meta charset="utf-8">'
    '<style>html,body{{margin:0;padding:0;overflow:hidden;background:transparent}}'
    'svg{{display:block}}</style></head><body>{svg}</body></html>'
)


def validate_vector_graphic(graphic: VectorGraphic) -> None:
    """
    Check that ``graphic`` holds a well-formed SVG sized as it claims.

    Raises:
        EncodeError: If the SVG does not parse or its size disagrees with
            the graphic's dimensions.
    """
    if graphic.width <= 0 or graphic.height <= 0:
        raise EncodeError(f"Invalid graphic size {graphic.width}x{graphic.height}")
    try:
        root = ET.fromstring(graphic.svg)
    except ET.ParseError as e:
        raise EncodeError(f"Malformed SVG: {e}") from e
    if root.tag != _SVG_TAG:
        raise EncodeError(f"Expected an <svg> root element, got {root.tag!r}")
    if root.get("width") != str(graphic.width) or root.get("height") != str(graphic.height):
        raise EncodeError(
            f"SVG is {root.get('width')}x{root.get('height')}, expected {graphic.width}x{graphic.height}"
        )


async def encode(graphic: VectorGraphic) -> bytes:
    """
    Rasterize ``graphic`` to PNG bytes at its own pixel size.

    Raises:
        EncodeError: If the SVG is malformed or the browser fails to draw it.
    """
    validate_vector_graphic(graphic)

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True, args=_BROWSER_ARGS)
            try:
                page = await browser.new_page(
                    viewport={"width": graphic.width, "height": graphic.height},
                    device_scale_factor=1,
                )
                await page.set_content(_PAGE_TEMPLATE.format(svg=graphic.svg), wait_until="load")
                png_bytes = await page.screenshot(
                    type='png',
                    full_page=False,
                    clip={"x": 0, "y": 0, "width": graphic.width, "height": graphic.height},
                )
            finally:
                await browser.close()
    except PlaywrightError as e:
        raise EncodeError(f"Rasterization failed: {e}") from e

    if not png_bytes:
        raise EncodeError("Rasterization produced no output")
    return png_bytes
