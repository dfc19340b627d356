"""
Font-size heuristic for the preview text.

The size is derived from the container dimensions and the text length only;
glyph metrics are not consulted, so very long text can still overflow at the
minimum size.
"""

# Texts longer than this shrink in proportion to their length
SHRINK_THRESHOLD = 10


def text_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def calculate_font_size(text: str, container_width: float, container_height: float) -> float:
    """
    Pick a font size in pixels for ``text`` inside a container.

    Args:
        text: Text to be drawn
        container_width: Container width in pixels
        container_height: Container height in pixels

    Returns:
        ``max(candidate, container_height / 10)`` where the candidate is
        ``min(width / 8, height / 3)``, scaled by ``10 / length`` once the
        text is longer than ten characters.
    """
    base_size = min(container_width / 8, container_height / 3)

    length = text_length(text)
    font_size = base_size
    if length > SHRINK_THRESHOLD:
        font_size = base_size * (SHRINK_THRESHOLD / length)

    min_font_size = container_height / 10
    return max(font_size, min_font_size)
