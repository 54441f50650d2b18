"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from photobooth.domain.photos import NewPhoto, PhotoRecord
from photobooth.services.photos import PhotoRepository

PHOTO_COLUMNS = "id, original_name, mime_type, size, blob_url, created_at, updated_at"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo metadata persistence."""

    client: Client
    table_name: str = "photos"

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        """Insert a photo row and return it."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "original_name": photo.original_name,
                    "mime_type": photo.mime_type,
                    "size": photo.size,
                    "blob_url": photo.blob_url,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo metadata")
        return _to_record(response.data[0])

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        response = (
            self.client.table(self.table_name)
            .select(PHOTO_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def list_after(
        self, cursor: PhotoRecord | None, limit: int, query: str | None
    ) -> list[PhotoRecord]:
        """Return a keyset page of rows that have a blob URL."""
        request = self._with_url(self.client.table(self.table_name).select(PHOTO_COLUMNS))
        if query:
            request = request.ilike("original_name", _contains_pattern(query))
        if cursor is not None:
            created = _quote(cursor.created_at.isoformat())
            request = request.or_(
                f"created_at.lt.{created},"
                f"and(created_at.eq.{created},id.lt.{cursor.id})"
            )
        response = (
            request.order("created_at", desc=True)
            .order("id", desc=True)
            .limit(limit)
            .execute()
        )
        return [_to_record(row) for row in response.data or []]

    def list_page(
        self, offset: int, limit: int, query: str | None
    ) -> tuple[list[PhotoRecord], int]:
        """Return one offset page of rows that have a blob URL, with a total."""
        request = self._with_url(
            self.client.table(self.table_name).select(PHOTO_COLUMNS, count="exact")
        )
        if query:
            request = request.ilike("original_name", _contains_pattern(query))
        response = (
            request.order("created_at", desc=True)
            .order("id", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        rows = [_to_record(row) for row in response.data or []]
        total = response.count if response.count is not None else len(rows)
        return rows, total

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo metadata row."""
        self.client.table(self.table_name).delete().eq("id", str(photo_id)).execute()

    def delete_legacy_photos(self) -> int:
        """Delete rows whose blob URL is null or empty."""
        response = (
            self.client.table(self.table_name)
            .delete()
            .or_('blob_url.is.null,blob_url.eq.""')
            .execute()
        )
        return len(response.data or [])

    def ping(self) -> None:
        self.client.table(self.table_name).select("id").limit(1).execute()

    @staticmethod
    def _with_url(request):  # type: ignore[no-untyped-def]
        return request.not_.is_("blob_url", "null").neq("blob_url", "")


def _contains_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _to_record(row: dict[str, object]) -> PhotoRecord:
    created_at = _parse_timestamp(row.get("created_at"))
    if created_at is None:
        raise RuntimeError("Photo row is missing created_at")
    blob_url = row.get("blob_url")
    return PhotoRecord(
        id=UUID(str(row["id"])),
        original_name=str(row.get("original_name") or ""),
        mime_type=str(row.get("mime_type") or ""),
        size=int(row.get("size") or 0),
        blob_url=str(blob_url) if blob_url is not None else None,
        created_at=created_at,
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
