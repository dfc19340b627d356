"""
Vector rendering of layout trees.

Resolves the box model of a layout tree (percentage sizes, absolute
positioning, flex-style centering), typesets text nodes with the supplied
font through FreeType and writes the result as an SVG document. Glyphs are
embedded as outline paths, so the SVG does not depend on fonts installed on
the machine that rasterizes it.
"""
import html
import io
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import freetype

from ..core.errors import RenderError
from .layout import LayoutNode, Length, NodeKind, Style

# CSS white space; no-break and ideographic spaces are part of the word
_COLLAPSIBLE_SPACE = re.compile(r"[ \t\n\f\r]+")

_LOAD_FLAGS = freetype.FT_LOAD_NO_SCALE | freetype.FT_LOAD_NO_HINTING | freetype.FT_LOAD_NO_BITMAP

_OBJECT_FIT_ASPECT = {
    "cover": "xMidYMid slice",
    "contain": "xMidYMid meet",
    "fill": "none",
}

Command = Tuple[str, Tuple[Tuple[float, float], ...]]


@dataclass(frozen=True)
class VectorGraphic:
    svg: str
    width: int
    height: int


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class _Glyph:
    advance: float
    commands: Tuple[Command, ...]


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def resolve_length(value: Optional[Length], reference: float) -> Optional[float]:
    """Resolve a pixel number or a percentage string against ``reference``."""
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        try:
            if raw.endswith("%"):
                return reference * float(raw[:-1]) / 100.0
            if raw.endswith("px"):
                return float(raw[:-2])
            return float(raw)
        except ValueError as e:
            raise RenderError(f"Invalid length: {value!r}") from e
    return float(value)


class FontFace:
    """A single font face loaded from bytes, with per-character glyph cache."""

    def __init__(self, font_bytes: bytes):
        if not font_bytes:
            raise RenderError("Font data is empty")
        try:
            self.face = freetype.Face(io.BytesIO(font_bytes))
        except freetype.FT_Exception as e:
            raise RenderError(f"Malformed font data: {e}") from e
        self.units_per_em = self.face.units_per_EM
        if not self.units_per_em:
            raise RenderError("Font has no scalable outlines")
        self.ascender = self.face.ascender
        self.descender = self.face.descender
        self._glyphs: Dict[str, _Glyph] = {}

    def glyph(self, char: str) -> _Glyph:
        cached = self._glyphs.get(char)
        if cached is not None:
            return cached
        try:
            self.face.load_char(char, _LOAD_FLAGS)
        except freetype.FT_Exception as e:
            raise RenderError(f"Cannot load glyph for {char!r}: {e}") from e
        slot = self.face.glyph
        commands: List[Command] = []

        def move_to(p, _):
            commands.append(("M", ((p.x, p.y),)))
            return 0

        def line_to(p, _):
            commands.append(("L", ((p.x, p.y),)))
            return 0

        def conic_to(c, p, _):
            commands.append(("Q", ((c.x, c.y), (p.x, p.y))))
            return 0

        def cubic_to(c1, c2, p, _):
            commands.append(("C", ((c1.x, c1.y), (c2.x, c2.y), (p.x, p.y))))
            return 0

        if not char.isspace():
            slot.outline.decompose(move_to=move_to, line_to=line_to, conic_to=conic_to, cubic_to=cubic_to)
        glyph = _Glyph(advance=float(slot.metrics.horiAdvance), commands=tuple(commands))
        self._glyphs[char] = glyph
        return glyph

    def measure(self, text: str, font_size: float) -> float:
        scale = font_size / self.units_per_em
        return sum(self.glyph(ch).advance for ch in text) * scale

    def path_data(self, text: str, x: float, baseline: float, font_size: float) -> str:
        """SVG path data for ``text`` with its pen starting at (x, baseline)."""
        scale = font_size / self.units_per_em
        parts: List[str] = []
        pen_x = x
        for ch in text:
            glyph = self.glyph(ch)
            open_contour = False
            for op, points in glyph.commands:
                if op == "M":
                    if open_contour:
                        parts.append("Z")
                    open_contour = True
                coords = " ".join(
                    f"{_fmt(pen_x + px * scale)} {_fmt(baseline - py * scale)}" for px, py in points
                )
                parts.append(f"{op}{coords}")
            if open_contour:
                parts.append("Z")
            pen_x += glyph.advance * scale
        return "".join(parts)


def wrap_text(face: FontFace, text: str, font_size: float, max_width: Optional[float], style: Style) -> List[str]:
    """
    Break ``text`` into lines no wider than ``max_width``.

    Whitespace collapses to single spaces. With ``word-break: keep-all`` lines
    only break between whitespace-separated words; ``overflow-wrap:
    break-word`` still splits a word that cannot fit on a line of its own.
    """
    if style.word_break == "break-all":
        words = list(_COLLAPSIBLE_SPACE.sub("", text))
    else:
        words = [w for w in _COLLAPSIBLE_SPACE.split(text) if w]
    if not words:
        return []
    if max_width is None:
        return [" ".join(words)]

    space = face.measure(" ", font_size)
    joiner = "" if style.word_break == "break-all" else " "
    gap = 0.0 if style.word_break == "break-all" else space
    lines: List[str] = []
    current: List[str] = []
    current_width = 0.0

    for word in words:
        word_width = face.measure(word, font_size)
        candidate = current_width + gap + word_width if current else word_width
        if candidate <= max_width:
            current.append(word)
            current_width = candidate
            continue
        if current:
            lines.append(joiner.join(current))
            current, current_width = [], 0.0
        if word_width <= max_width or style.overflow_wrap not in ("break-word", "anywhere"):
            current, current_width = [word], word_width
            continue
        chunk = ""
        for ch in word:
            if chunk and face.measure(chunk + ch, font_size) > max_width:
                lines.append(chunk)
                chunk = ""
            chunk += ch
        current, current_width = [chunk], face.measure(chunk, font_size)

    if current:
        lines.append(joiner.join(current))
    return lines


class _SvgWriter:
    def __init__(self, face: FontFace):
        self.face = face
        self.defs: List[str] = []
        self.body: List[str] = []

    def _filter_for(self, style: Style) -> str:
        shadow = style.text_shadow
        if shadow is None:
            return ""
        filter_id = f"shadow{len(self.defs)}"
        self.defs.append(
            f'<filter id="{filter_id}" x="-50%" y="-50%" width="200%" height="200%">'
            f'<feDropShadow dx="{_fmt(shadow.offset_x)}" dy="{_fmt(shadow.offset_y)}" '
            f'stdDeviation="{_fmt(shadow.blur / 2)}" flood-color="{html.escape(shadow.color)}" '
            f'flood-opacity="{_fmt(shadow.opacity)}"/></filter>'
        )
        return f' filter="url(#{filter_id})"'

    @staticmethod
    def _place(parent: Box, parent_style: Style, width: float, height: float) -> Box:
        x, y = parent.x, parent.y
        if parent_style.justify_content == "center":
            x += (parent.width - width) / 2
        elif parent_style.justify_content == "flex-end":
            x += parent.width - width
        if parent_style.align_items == "center":
            y += (parent.height - height) / 2
        elif parent_style.align_items == "flex-end":
            y += parent.height - height
        return Box(x, y, width, height)

    def draw(self, node: LayoutNode, box: Box) -> None:
        if node.kind is NodeKind.IMAGE:
            self._draw_image(node, box)
        elif node.kind is NodeKind.CONTAINER:
            self._draw_container(node, box)
        else:
            raise RenderError("Text nodes must be placed inside a container")

    def _child_box(self, child: LayoutNode, parent: Box, parent_style: Style) -> Box:
        width = resolve_length(child.geometry.width, parent.width)
        height = resolve_length(child.geometry.height, parent.height)
        if child.geometry.position == "absolute":
            return Box(parent.x, parent.y,
                       parent.width if width is None else width,
                       parent.height if height is None else height)
        return self._place(parent, parent_style,
                           parent.width if width is None else width,
                           parent.height if height is None else height)

    def _draw_container(self, node: LayoutNode, box: Box) -> None:
        if node.style.background:
            self.body.append(
                f'<rect x="{_fmt(box.x)}" y="{_fmt(box.y)}" width="{_fmt(box.width)}" '
                f'height="{_fmt(box.height)}" fill="{html.escape(node.style.background)}"/>'
            )
        # stable sort keeps document order within one z-index
        for child in sorted(node.children, key=lambda c: c.style.z_index):
            if child.kind is NodeKind.TEXT:
                self._draw_text(child, box, node.style)
            else:
                self.draw(child, self._child_box(child, box, node.style))

    def _draw_image(self, node: LayoutNode, box: Box) -> None:
        if not node.src:
            return
        aspect = _OBJECT_FIT_ASPECT.get(node.style.object_fit or "fill", "none")
        self.body.append(
            f'<image x="{_fmt(box.x)}" y="{_fmt(box.y)}" width="{_fmt(box.width)}" '
            f'height="{_fmt(box.height)}" preserveAspectRatio="{aspect}" '
            f'href="{html.escape(node.src, quote=True)}"/>'
        )

    def _draw_text(self, node: LayoutNode, parent: Box, parent_style: Style) -> None:
        style = node.style
        font_size = style.font_size
        if font_size is None or font_size <= 0:
            raise RenderError(f"Invalid font size: {font_size!r}")
        max_width = resolve_length(style.max_width, parent.width)
        lines = wrap_text(self.face, node.text or "", font_size, max_width, style)
        if not lines:
            return

        line_height = (style.line_height or 1.2) * font_size
        widths = [self.face.measure(line, font_size) for line in lines]
        block_width = max(widths) if max_width is None else min(max(widths), max_width)
        block = self._place(parent, parent_style, block_width, line_height * len(lines))

        scale = font_size / self.face.units_per_em
        ascent = self.face.ascender * scale
        content_height = (self.face.ascender - self.face.descender) * scale
        half_leading = (line_height - content_height) / 2

        path_parts = []
        for index, (line, line_width) in enumerate(zip(lines, widths)):
            if style.text_align == "center":
                x = block.x + (block.width - line_width) / 2
            elif style.text_align == "right":
                x = block.x + block.width - line_width
            else:
                x = block.x
            baseline = block.y + index * line_height + half_leading + ascent
            path_parts.append(self.face.path_data(line, x, baseline, font_size))

        fill = html.escape(style.color or "#000")
        self.body.append(f'<path d="{"".join(path_parts)}" fill="{fill}"{self._filter_for(style)}/>')

    def document(self, width: int, height: int) -> str:
        defs = f"<defs>{''.join(self.defs)}</defs>" if self.defs else ""
        return (
            f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
            f'xmlns="http://www.w3.org/2000/svg">{defs}{"".join(self.body)}</svg>'
        )


def render(layout: LayoutNode, font_bytes: bytes, width: int, height: int) -> VectorGraphic:
    """
    Render ``layout`` to an SVG of exactly ``width`` x ``height`` pixels.

    The supplied font is used for every text node regardless of the weight
    or style it requests.

    Raises:
        RenderError: On non-positive dimensions, a root node whose size does
            not match them, or font data FreeType cannot load.
    """
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise RenderError(f"{name} must be a positive integer, got {value!r}")
    if layout.kind is not NodeKind.CONTAINER:
        raise RenderError("Layout root must be a container")
    root_width = resolve_length(layout.geometry.width, width)
    root_height = resolve_length(layout.geometry.height, height)
    if (root_width is not None and root_width != width) or (root_height is not None and root_height != height):
        raise RenderError(
            f"Layout root is {root_width}x{root_height}, requested {width}x{height}"
        )

    writer = _SvgWriter(FontFace(font_bytes))
    writer.draw(layout, Box(0.0, 0.0, float(width), float(height)))
    return VectorGraphic(svg=writer.document(width, height), width=width, height=height)
