"""Blob storage interface and URL checks."""

from typing import Protocol
from urllib.parse import urlparse

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class BlobStore(Protocol):
    """Object store holding photo bytes, addressed by public URL."""

    def ensure_configured(self) -> None:
        """Raise ``MissingConfigurationError`` when writes cannot succeed."""

    async def put(self, name: str, data: bytes, content_type: str) -> str:
        """Store bytes publicly readable under a key derived from ``name``."""

    async def delete(self, url: str) -> None:
        """Delete the object behind ``url``."""

    async def read(self, url: str) -> bytes:
        """Return the bytes behind ``url``."""

    async def close(self) -> None:
        """Release network resources."""


def is_secure_url(url: str | None) -> bool:
    """Return true for https URLs, or http URLs pointing at a loopback host."""
    if not url or not url.strip():
        return False
    parsed = urlparse(url.strip())
    if not parsed.netloc:
        return False
    if parsed.scheme == "https":
        return True
    return parsed.scheme == "http" and parsed.hostname in LOOPBACK_HOSTS
