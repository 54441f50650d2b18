"""Supabase Storage blob store."""

import asyncio
from dataclasses import dataclass
from urllib.parse import unquote, urlparse
from uuid import uuid4

import httpx
from supabase import Client

from photobooth.domain.errors import MissingConfigurationError, NotFoundError
from photobooth.domain.filenames import sanitize_filename
from photobooth.services.storage import BlobStore


@dataclass
class SupabaseBlobStore(BlobStore):
    """Stores photos in a public Supabase Storage bucket.

    SDK calls are synchronous and run in worker threads; downloads fetch the
    public URL with httpx, the same way browsers read it.
    """

    client: Client
    bucket: str | None
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, client: Client, bucket: str | None, timeout_seconds: float = 10.0
    ) -> "SupabaseBlobStore":
        """Create a blob store with a managed httpx session."""
        return cls(
            client=client,
            bucket=bucket,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    def ensure_configured(self) -> None:
        if not self.bucket:
            raise MissingConfigurationError(
                "Missing required environment variable: STORAGE_BUCKET"
            )

    async def put(self, name: str, data: bytes, content_type: str) -> str:
        """Upload bytes under ``<uuid>-<sanitized name>`` and return the public URL."""
        self.ensure_configured()
        key = f"{uuid4().hex}-{sanitize_filename(name) or 'photo'}"
        bucket = self.client.storage.from_(self.bucket)
        await asyncio.to_thread(
            bucket.upload,
            key,
            data,
            {"content-type": content_type, "upsert": "false"},
        )
        return await asyncio.to_thread(bucket.get_public_url, key)

    async def delete(self, url: str) -> None:
        self.ensure_configured()
        key = self.object_key(url)
        await asyncio.to_thread(self.client.storage.from_(self.bucket).remove, [key])

    async def read(self, url: str) -> bytes:
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError("Photo file not available")
        response.raise_for_status()
        return response.content

    def object_key(self, url: str) -> str:
        """Extract the object key from a public URL of this bucket."""
        marker = f"/object/public/{self.bucket}/"
        path = urlparse(url).path
        _, found, key = path.partition(marker)
        if not found or not key:
            raise ValueError(f"URL is not in bucket {self.bucket!r}")
        return unquote(key)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
