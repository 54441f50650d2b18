"""Photo domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/jpg"})


@dataclass(frozen=True)
class PhotoRecord:
    """A row of the photos table."""

    id: UUID
    original_name: str
    mime_type: str
    size: int
    blob_url: str | None
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def has_url(self) -> bool:
        """Return true when the row points at a stored blob."""
        return bool(self.blob_url and self.blob_url.strip())


@dataclass(frozen=True)
class NewPhoto:
    """Metadata for a photo whose blob write has already succeeded."""

    original_name: str
    mime_type: str
    size: int
    blob_url: str


@dataclass(frozen=True)
class IncomingFile:
    """A file part read from a multipart upload."""

    filename: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class CursorPage:
    """Keyset page of photos, newest first."""

    items: list[PhotoRecord]
    next_cursor: UUID | None
    limit: int


@dataclass(frozen=True)
class OffsetPage:
    """Numbered page of photos with totals."""

    items: list[PhotoRecord]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return max(1, -(-self.total // self.limit))
