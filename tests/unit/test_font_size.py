"""
Unit tests for the font-size heuristic.
"""
import pytest

from ogp_service.services.font_size import calculate_font_size, text_length


class TestFontSize:

    def test_single_character(self):
        assert calculate_font_size("桜", 1200, 630) == 150

    def test_twenty_characters(self):
        assert calculate_font_size("12345678901234567890", 1200, 630) == 75

    @pytest.mark.parametrize("text", ["", "a", "桜が咲いた", "0123456789"])
    def test_short_text_uses_base_size(self, text):
        # base = min(1200 / 8, 630 / 3)
        assert calculate_font_size(text, 1200, 630) == 150

    def test_height_bound_base_size(self):
        assert calculate_font_size("short", 1200, 300) == 100

    def test_never_below_floor(self):
        assert calculate_font_size("x" * 1000, 1200, 630) == 63

    def test_floor_wins_for_wide_short_containers(self):
        # base = min(10, 100) = 10, floor = 30
        assert calculate_font_size("hi", 80, 300) == 30

    def test_non_increasing_with_length(self):
        sizes = [calculate_font_size("a" * n, 1200, 630) for n in range(1, 80)]
        assert all(later <= earlier for earlier, later in zip(sizes, sizes[1:]))
        assert min(sizes) >= 63

    def test_surrogate_pairs_count_twice(self):
        assert text_length("🌸") == 2
        assert text_length("桜") == 1
        # six emoji are twelve UTF-16 units: 150 * 10 / 12
        assert calculate_font_size("🌸" * 6, 1200, 630) == pytest.approx(125)
