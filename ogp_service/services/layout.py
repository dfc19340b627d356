"""
Layout model for preview images.

A layout is a small tree of boxes. Each node is a container, an image or a
text run, with explicit geometry and style. The builder below produces the
one composition the service draws: a white canvas, the background image
cover-fitted over it, and the text centered on top.
"""
import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..core.errors import InvalidRenderRequest
from .asset_cache import Assets
from .font_size import calculate_font_size

# Pixels as a number, or a percentage of the parent such as "90%"
Length = Union[int, float, str]


class NodeKind(str, enum.Enum):
    CONTAINER = "container"
    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class RenderRequest:
    width: int
    height: int
    text: str

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidRenderRequest(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.text, str):
            raise InvalidRenderRequest(f"text must be a string, got {type(self.text).__name__}")


@dataclass(frozen=True)
class TextShadow:
    offset_x: float
    offset_y: float
    blur: float
    color: str
    opacity: float


@dataclass(frozen=True)
class Geometry:
    width: Optional[Length] = None
    height: Optional[Length] = None
    position: str = "relative"


@dataclass(frozen=True)
class Style:
    background: Optional[str] = None
    color: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[int] = None
    text_shadow: Optional[TextShadow] = None
    text_align: str = "left"
    align_items: str = "stretch"
    justify_content: str = "flex-start"
    object_fit: Optional[str] = None
    max_width: Optional[Length] = None
    line_height: Optional[float] = None
    word_break: str = "normal"
    overflow_wrap: str = "normal"
    z_index: int = 0


@dataclass(frozen=True)
class LayoutNode:
    kind: NodeKind
    geometry: Geometry = field(default_factory=Geometry)
    style: Style = field(default_factory=Style)
    children: Tuple["LayoutNode", ...] = ()
    src: Optional[str] = None
    text: Optional[str] = None


TEXT_COLOR = "#fff"
TEXT_SHADOW = TextShadow(offset_x=4, offset_y=4, blur=8, color="#000", opacity=0.7)


def build_layout(request: RenderRequest, assets: Assets) -> LayoutNode:
    """
    Build the preview composition for ``request``.

    Bottom to top: white canvas of the requested size, background image
    covering the canvas, then a full-size centering overlay holding the text.
    """
    width, height = request.width, request.height

    background = LayoutNode(
        kind=NodeKind.IMAGE,
        geometry=Geometry(width="100%", height="100%", position="absolute"),
        style=Style(object_fit="cover"),
        src=assets.background_data_uri,
    )

    text_node = LayoutNode(
        kind=NodeKind.TEXT,
        style=Style(
            font_size=calculate_font_size(request.text, width, height),
            color=TEXT_COLOR,
            text_shadow=TEXT_SHADOW,
            text_align="center",
            max_width="90%",
            font_weight=700,
            line_height=1.2,
            word_break="keep-all",
            overflow_wrap="break-word",
        ),
        text=request.text,
    )

    overlay = LayoutNode(
        kind=NodeKind.CONTAINER,
        geometry=Geometry(width="100%", height="100%", position="absolute"),
        style=Style(align_items="center", justify_content="center", z_index=1),
        children=(text_node,),
    )

    return LayoutNode(
        kind=NodeKind.CONTAINER,
        geometry=Geometry(width=width, height=height, position="relative"),
        style=Style(background="#fff", align_items="center", justify_content="center"),
        children=(background, overlay),
    )
