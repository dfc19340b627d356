"""
Process-wide cache for the provisioned rendering assets.

The font and the background image are fetched from the object store on the
first image request and kept for the lifetime of the process. Two requests
arriving on a cold cache may both fetch and both populate; the values they
write are identical, so the race is tolerated rather than serialized.
"""
import asyncio
import base64
import enum
from dataclasses import dataclass
from typing import Optional

from ..core.errors import AssetUnavailable
from ..storage.object_store import ObjectStore


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass(frozen=True)
class Assets:
    font_bytes: bytes
    background_data_uri: str


def to_png_data_uri(data: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(data).decode("ascii")


class AssetCache:
    """Lazily populated, never evicted holder of the font and background image."""

    def __init__(self, store: ObjectStore, font_key: str, background_key: str):
        self.store = store
        self.font_key = font_key
        self.background_key = background_key
        self._assets: Optional[Assets] = None

    @property
    def state(self) -> CacheState:
        return CacheState.POPULATED if self._assets is not None else CacheState.EMPTY

    async def get_or_fetch(self) -> Assets:
        """
        Return the cached assets, fetching them on first use.

        Raises:
            AssetUnavailable: If either object is missing from storage. The
                cache is left empty in that case.
        """
        if self._assets is not None:
            return self._assets

        font_bytes, background_bytes = await asyncio.gather(
            self.store.get(self.font_key),
            self.store.get(self.background_key),
        )

        missing = [
            key for key, value in ((self.font_key, font_bytes), (self.background_key, background_bytes))
            if value is None
        ]
        if missing:
            raise AssetUnavailable(missing)

        self._assets = Assets(
            font_bytes=font_bytes,
            background_data_uri=to_png_data_uri(background_bytes),
        )
        return self._assets

    def reset(self) -> None:
        """Drop cached assets (process teardown and tests only)."""
        self._assets = None
