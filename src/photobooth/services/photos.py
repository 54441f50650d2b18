"""Photo lookup and listing."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from photobooth.domain.errors import NotFoundError, QueryTimeoutError, UpstreamError
from photobooth.domain.photos import CursorPage, NewPhoto, OffsetPage, PhotoRecord

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photo metadata."""

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        """Insert a photo row and return it."""

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def list_after(
        self, cursor: PhotoRecord | None, limit: int, query: str | None
    ) -> list[PhotoRecord]:
        """Return up to ``limit`` rows with a blob URL, older than ``cursor``.

        Rows are ordered by ``created_at`` then ``id``, both descending.
        """

    def list_page(
        self, offset: int, limit: int, query: str | None
    ) -> tuple[list[PhotoRecord], int]:
        """Return one offset page of rows with a blob URL and their total count."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""

    def delete_legacy_photos(self) -> int:
        """Delete rows whose blob URL is null or empty; return how many."""

    def ping(self) -> None:
        """Run a trivial query, raising when the store is unreachable."""


def clamp_limit(raw: str | int | None) -> int:
    """Parse a client limit, falling back to the default and clamping to range."""
    try:
        value = int(raw) if raw is not None and str(raw).strip() else DEFAULT_LIMIT
    except ValueError:
        value = DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, value))


def parse_page(raw: str | int | None) -> int:
    try:
        value = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    return max(1, value)


def normalize_query(raw: str | None) -> str | None:
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None


def parse_photo_id(raw: str | None) -> UUID | None:
    if not raw:
        return None
    try:
        return UUID(raw.strip())
    except ValueError:
        return None


@dataclass
class PhotoListingService:
    """Read side of the photo store.

    Both listings exclude legacy rows (no blob URL). The public API pages by
    cursor, the admin panel by page number; each endpoint sticks to one mode.
    """

    repository: PhotoRepository
    timeout_seconds: float = 5.0

    async def list_by_cursor(
        self, cursor: str | None, limit: str | int | None, query: str | None
    ) -> CursorPage:
        """Return the page after ``cursor`` (the last id the client saw)."""
        effective_limit = clamp_limit(limit)
        search = normalize_query(query)
        rows = await self._bounded(
            self._fetch_after, cursor, effective_limit + 1, search
        )
        if rows is None:
            return CursorPage(items=[], next_cursor=None, limit=effective_limit)
        items = rows[:effective_limit]
        has_more = len(rows) > effective_limit
        next_cursor = items[-1].id if has_more and items else None
        return CursorPage(items=items, next_cursor=next_cursor, limit=effective_limit)

    async def list_by_page(
        self, page: str | int | None, limit: str | int | None, query: str | None
    ) -> OffsetPage:
        """Return a numbered page with the total match count."""
        effective_page = parse_page(page)
        effective_limit = clamp_limit(limit)
        offset = (effective_page - 1) * effective_limit
        items, total = await self._bounded(
            self.repository.list_page, offset, effective_limit, normalize_query(query)
        )
        return OffsetPage(
            items=items, page=effective_page, limit=effective_limit, total=total
        )

    async def get_photo(self, photo_id: str) -> PhotoRecord:
        """Return a single photo or raise ``NotFoundError``."""
        parsed = parse_photo_id(photo_id)
        if parsed is None:
            raise NotFoundError()
        try:
            photo = await asyncio.to_thread(self.repository.get_photo, parsed)
        except Exception as exc:
            logger.exception("Photo lookup failed", extra={"photo_id": str(parsed)})
            raise UpstreamError("Error fetching photo") from exc
        if photo is None:
            raise NotFoundError()
        return photo

    def _fetch_after(
        self, cursor: str | None, limit: int, query: str | None
    ) -> list[PhotoRecord] | None:
        anchor = None
        if cursor:
            cursor_id = parse_photo_id(cursor)
            anchor = self.repository.get_photo(cursor_id) if cursor_id else None
            if anchor is None:
                return None
        return self.repository.list_after(anchor, limit, query)

    async def _bounded(self, func, *args):  # type: ignore[no-untyped-def]
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            logger.warning(
                "Photo listing exceeded %.1fs", self.timeout_seconds
            )
            raise QueryTimeoutError() from exc
        except Exception as exc:
            logger.exception("Photo listing failed")
            raise UpstreamError("Error fetching photos") from exc


def serialize_photo(photo: PhotoRecord) -> dict[str, object]:
    """Public JSON shape of a photo."""
    return {
        "id": str(photo.id),
        "originalName": photo.original_name,
        "mimeType": photo.mime_type,
        "size": photo.size,
        "createdAt": photo.created_at.isoformat(),
        "url": photo.blob_url if photo.has_url else None,
    }


def serialize_photo_detail(photo: PhotoRecord) -> dict[str, object]:
    payload = serialize_photo(photo)
    payload["updatedAt"] = photo.updated_at.isoformat() if photo.updated_at else None
    return payload
