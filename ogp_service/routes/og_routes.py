"""
Open Graph (OG) Image Generation Routes.
Serves dynamic preview images and the share pages that reference them.
"""
from functools import lru_cache

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from ..core.config import settings
from ..core.errors import AssetUnavailable, EncodeError, RenderError
from ..services.og_service import OGService, get_og_service
from ..services.share_page import (
    DEFAULT_TEXT,
    DEFAULT_TREE_ID,
    DEFAULT_USER_ID,
    SharePageBuilder,
)
from ..utils.debug import print_step
from ..utils.security import split_path_segments

INVALID_ENDPOINT = "Invalid endpoint"

router = APIRouter(tags=["og"])


@lru_cache(maxsize=1)
def get_share_page_builder() -> SharePageBuilder:
    return SharePageBuilder(settings)


@router.get("/image/{width}/{height}/{text:path}")
async def generate_og_image(
    width: int = Path(..., gt=0, description="Image width in pixels"),
    height: int = Path(..., gt=0, description="Image height in pixels"),
    text: str = Path(..., description="Text to draw, URL-encoded"),
    og_service: OGService = Depends(get_og_service),
):
    """
    Generate a preview image with ``text`` over the background.

    Returns:
        PNG image with Cache-Control headers for 7-day caching
    """
    print_step("OG Image Request", {
        "width": width,
        "height": height,
        "text_length": len(text)
    }, "input")

    if not text:
        return PlainTextResponse(INVALID_ENDPOINT, status_code=400)

    try:
        image_bytes = await og_service.generate_image(width=width, height=height, text=text)
    except AssetUnavailable as e:
        print_step("OG Image Assets Missing", str(e), "error")
        return PlainTextResponse("Required assets not found", status_code=500)
    except (RenderError, EncodeError) as e:
        print_step("OG Image Generation Failed", str(e), "error")
        return PlainTextResponse("Failed to generate image", status_code=500)

    return Response(
        content=image_bytes,
        media_type="image/png",
        headers={"Cache-Control": f"max-age={settings.IMAGE_CACHE_MAX_AGE}"}
    )


@router.get("/html{rest:path}", response_class=HTMLResponse)
async def share_page(
    request: Request,
    builder: SharePageBuilder = Depends(get_share_page_builder),
):
    """
    Share page with Open Graph / Twitter card tags that redirects to the tree page.

    Path: /html[/{text}[/{user_id}[/{tree_id}]]], each segment URL-encoded.
    Missing segments fall back to defaults.
    """
    raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
    root_path = request.scope.get("root_path", "").encode("utf-8")
    if root_path and raw_path.startswith(root_path):
        raw_path = raw_path[len(root_path):]

    segments = split_path_segments(raw_path, "/html")
    if segments is None or len(segments) > 3:
        return PlainTextResponse(INVALID_ENDPOINT, status_code=400)

    text, user_id, tree_id = (segments + [None] * 3)[:3]
    origin = settings.PUBLIC_ORIGIN or str(request.base_url)
    page = builder.build(
        origin=origin,
        text=text or DEFAULT_TEXT,
        user_id=user_id or DEFAULT_USER_ID,
        tree_id=tree_id or DEFAULT_TREE_ID,
    )
    print_step("Share Page", {"image_url": page.image_url, "redirect_url": page.redirect_url}, "output")
    return HTMLResponse(content=page.html, media_type="text/html;charset=UTF-8")
