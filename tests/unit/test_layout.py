"""
Unit tests for the layout builder.
"""
import pytest

from ogp_service.core.errors import InvalidRenderRequest
from ogp_service.services.layout import NodeKind, RenderRequest, build_layout


class TestRenderRequest:

    @pytest.mark.parametrize("width,height", [(0, 630), (1200, 0), (-1, 630), (1200.5, 630), ("1200", 630), (True, 630)])
    def test_rejects_invalid_dimensions(self, width, height):
        with pytest.raises(InvalidRenderRequest):
            RenderRequest(width=width, height=height, text="桜")

    def test_rejects_missing_dimensions(self):
        with pytest.raises(InvalidRenderRequest):
            RenderRequest(width=None, height=630, text="桜")

    def test_accepts_positive_integers(self):
        request = RenderRequest(width=1, height=1, text="")
        assert (request.width, request.height) == (1, 1)


class TestBuildLayout:

    def test_three_layers_in_stacking_order(self, assets):
        root = build_layout(RenderRequest(1200, 630, "桜"), assets)

        assert root.kind is NodeKind.CONTAINER
        assert (root.geometry.width, root.geometry.height) == (1200, 630)
        assert root.style.background == "#fff"

        background, overlay = root.children
        assert background.kind is NodeKind.IMAGE
        assert overlay.kind is NodeKind.CONTAINER
        assert overlay.style.z_index > background.style.z_index

    def test_background_covers_container(self, assets):
        background = build_layout(RenderRequest(1200, 630, "桜"), assets).children[0]

        assert background.src == assets.background_data_uri
        assert background.geometry.position == "absolute"
        assert (background.geometry.width, background.geometry.height) == ("100%", "100%")
        assert background.style.object_fit == "cover"

    def test_text_node_style(self, assets):
        overlay = build_layout(RenderRequest(1200, 630, "桜"), assets).children[1]
        (text_node,) = overlay.children

        assert overlay.style.align_items == "center"
        assert overlay.style.justify_content == "center"
        assert text_node.kind is NodeKind.TEXT
        assert text_node.text == "桜"
        assert text_node.style.font_size == 150
        assert text_node.style.color == "#fff"
        assert text_node.style.text_align == "center"
        assert text_node.style.max_width == "90%"
        assert text_node.style.font_weight == 700
        assert text_node.style.line_height == 1.2
        assert text_node.style.word_break == "keep-all"
        assert text_node.style.overflow_wrap == "break-word"

        shadow = text_node.style.text_shadow
        assert (shadow.offset_x, shadow.offset_y, shadow.blur, shadow.opacity) == (4, 4, 8, 0.7)

    def test_text_is_used_literally(self, assets):
        text = "100%25 <b>"
        text_node = build_layout(RenderRequest(1200, 630, text), assets).children[1].children[0]
        assert text_node.text == text

    def test_font_size_follows_heuristic(self, assets):
        text_node = build_layout(RenderRequest(1200, 630, "12345678901234567890"), assets).children[1].children[0]
        assert text_node.style.font_size == 75

    def test_layout_is_deterministic(self, assets):
        request = RenderRequest(800, 400, "同じ入力")
        assert build_layout(request, assets) == build_layout(request, assets)
