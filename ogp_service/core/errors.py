"""
Error taxonomy for the image-composition pipeline.
Each pipeline stage raises its own error type; none of them are retried.
"""
from typing import Iterable


class OGPError(Exception):
    """Base class for all pipeline failures."""


class InvalidRenderRequest(OGPError, ValueError):
    """Raised when render dimensions are absent or not positive integers."""


class AssetUnavailable(OGPError):
    """Raised when the font or the background image is missing from storage."""

    def __init__(self, missing_keys: Iterable[str]):
        self.missing_keys = tuple(missing_keys)
        super().__init__(f"Required assets not found: {', '.join(self.missing_keys)}")


class RenderError(OGPError):
    """Raised when a layout tree cannot be turned into a vector graphic."""


class EncodeError(OGPError):
    """Raised when a vector graphic cannot be rasterized."""
