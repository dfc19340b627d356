"""
Byte-object storage backing the font and background-image assets.

Two backends are provided: an S3-compatible bucket (AWS S3, Cloudflare R2,
MinIO) through boto3, and a plain directory on disk for local development.
Both answer a lookup with the raw object bytes, or None when the key does not
exist. Any other storage failure propagates to the caller.
"""
import asyncio
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from ..core.config import Settings

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class ObjectStore:
    """Interface for named byte-object lookups."""

    async def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError


class S3ObjectStore(ObjectStore):
    """Reads objects from an S3-compatible bucket."""

    def __init__(self, bucket: str, client=None, **client_kwargs):
        self.bucket = bucket
        self._client = client if client is not None else boto3.client("s3", **client_kwargs)

    def _get_sync(self, key: str) -> Optional[bytes]:
        try:
            obj = self._client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return None
            raise
        return obj["Body"].read()

    async def get(self, key: str) -> Optional[bytes]:
        # boto3 is blocking; keep the event loop free
        return await asyncio.to_thread(self._get_sync, key)


class LocalObjectStore(ObjectStore):
    """Reads objects from files below a root directory; keys are relative paths."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _get_sync(self, key: str) -> Optional[bytes]:
        root = self.root.resolve()
        path = (root / key).resolve()
        if root not in path.parents or not path.is_file():
            return None
        return path.read_bytes()

    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._get_sync, key)


def create_object_store(settings: Settings) -> ObjectStore:
    """Build the object store selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "local":
        return LocalObjectStore(Path(settings.LOCAL_ASSET_DIR))
    if settings.STORAGE_BACKEND == "s3":
        return S3ObjectStore(
            settings.S3_BUCKET,
            endpoint_url=settings.S3_ENDPOINT,
            aws_access_key_id=settings.S3_ACCESS_KEY,
            aws_secret_access_key=settings.S3_SECRET_KEY,
            region_name=settings.S3_REGION,
        )
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
