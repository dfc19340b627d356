"""
Configuration for the OGP image service.
Values are read from environment variables (a local .env file is honoured).
"""
import os
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Service settings resolved once at import time."""

    def __init__(self):
        self.DEBUG: bool = _as_bool(os.getenv("DEBUG"), False)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if self.DEBUG else "INFO").upper()

        # CORS
        self.CORS_ORIGINS: List[str] = _as_list(os.getenv("CORS_ORIGINS")) or ["http://localhost:5173"]
        self.EXTRA_CORS_ORIGINS: List[str] = _as_list(os.getenv("EXTRA_CORS_ORIGINS"))

        # Object storage holding the font and background image
        self.STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "s3").lower()
        self.S3_BUCKET: str = os.getenv("S3_BUCKET", "sakura-ogp")
        self.S3_ENDPOINT: Optional[str] = os.getenv("S3_ENDPOINT") or None
        self.S3_ACCESS_KEY: Optional[str] = os.getenv("S3_ACCESS_KEY") or None
        self.S3_SECRET_KEY: Optional[str] = os.getenv("S3_SECRET_KEY") or None
        self.S3_REGION: str = os.getenv("S3_REGION", "auto")
        self.LOCAL_ASSET_DIR: str = os.getenv("LOCAL_ASSET_DIR", "assets")
        self.FONT_OBJECT_KEY: str = os.getenv("FONT_OBJECT_KEY", "fonts/NotoSansJP-Regular.otf")
        self.BACKGROUND_OBJECT_KEY: str = os.getenv("BACKGROUND_OBJECT_KEY", "images/sakura.png")

        # Share page
        self.PUBLIC_ORIGIN: Optional[str] = os.getenv("PUBLIC_ORIGIN") or None
        self.FRONTEND_ORIGIN: str = os.getenv("FRONTEND_ORIGIN", "https://dreamtree.pages.dev")
        self.OG_DESCRIPTION: str = os.getenv("OG_DESCRIPTION", "桜と共に描かれたテキスト画像")
        self.TWITTER_SITE: str = os.getenv("TWITTER_SITE", "@YourTwitterHandle")
        self.SHARE_IMAGE_WIDTH: int = int(os.getenv("SHARE_IMAGE_WIDTH", "1200"))
        self.SHARE_IMAGE_HEIGHT: int = int(os.getenv("SHARE_IMAGE_HEIGHT", "630"))
        self.REDIRECT_DELAY_MS: int = int(os.getenv("REDIRECT_DELAY_MS", "1000"))

        # Image responses
        self.IMAGE_CACHE_MAX_AGE: int = int(os.getenv("IMAGE_CACHE_MAX_AGE", "604800"))

    @property
    def ALL_CORS_ORIGINS(self) -> List[str]:
        return self.CORS_ORIGINS + [o for o in self.EXTRA_CORS_ORIGINS if o not in self.CORS_ORIGINS]


settings = Settings()
