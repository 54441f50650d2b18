"""Filesystem blob store for the long-running server variant."""

import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote, urlparse

from photobooth.domain.errors import ForbiddenPathError, NotFoundError
from photobooth.domain.filenames import resolve_within, storage_safe_stem
from photobooth.services.storage import BlobStore

UPLOADS_ROUTE = "/uploads"


@dataclass
class LocalBlobStore(BlobStore):
    """Keeps photo bytes under ``uploads_dir``, served at ``/uploads``."""

    uploads_dir: Path
    public_base_url: str

    def ensure_configured(self) -> None:
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    async def put(self, name: str, data: bytes, content_type: str) -> str:
        """Write ``<timestamp>-<random>-<safe-name><ext>`` and return its URL."""
        self.ensure_configured()
        stem, suffix = storage_safe_stem(name)
        stored_name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{stem}{suffix}"
        resolve_within(self.uploads_dir, stored_name).write_bytes(data)
        base = self.public_base_url.rstrip("/")
        return f"{base}{UPLOADS_ROUTE}/{quote(stored_name)}"

    async def delete(self, url: str) -> None:
        self.path_for(url).unlink()

    async def read(self, url: str) -> bytes:
        path = self.path_for(url)
        if not path.is_file():
            raise NotFoundError("Photo file not available")
        return path.read_bytes()

    def path_for(self, url: str) -> Path:
        """Map a stored URL back to its file, refusing paths outside the root."""
        path = urlparse(url).path
        prefix = f"{UPLOADS_ROUTE}/"
        if not path.startswith(prefix):
            raise ForbiddenPathError()
        return resolve_within(self.uploads_dir, unquote(path[len(prefix) :]))

    async def close(self) -> None:
        return None
