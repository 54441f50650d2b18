"""Shared test fixtures."""

import base64
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from photobooth.api.rate_limits import limiter
from photobooth.config import Settings
from photobooth.containers import AppContainer, build_services
from photobooth.domain.errors import MissingConfigurationError
from photobooth.domain.photos import NewPhoto, PhotoRecord
from photobooth.services.photos import PhotoRepository
from photobooth.services.storage import BlobStore

BOUNDARY = "photobooth-test-boundary"
BASE_TIME = datetime(2024, 12, 20, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[UUID, PhotoRecord] = field(default_factory=dict)
    fail_create: bool = False
    delay_seconds: float = 0.0
    created: list[NewPhoto] = field(default_factory=list)
    _clock: int = 0

    def add(
        self,
        original_name: str,
        blob_url: str | None = "https://blob.example.com/photo.png",
        mime_type: str = "image/png",
        size: int = 100,
        created_at: datetime | None = None,
    ) -> PhotoRecord:
        self._clock += 1
        timestamp = created_at or BASE_TIME + timedelta(seconds=self._clock)
        photo = PhotoRecord(
            id=uuid4(),
            original_name=original_name,
            mime_type=mime_type,
            size=size,
            blob_url=blob_url,
            created_at=timestamp,
            updated_at=timestamp,
        )
        self.photos[photo.id] = photo
        return photo

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        if self.fail_create:
            raise RuntimeError("insert failed")
        self.created.append(photo)
        return self.add(
            original_name=photo.original_name,
            blob_url=photo.blob_url,
            mime_type=photo.mime_type,
            size=photo.size,
        )

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        return self.photos.get(photo_id)

    def _visible(self, query: str | None) -> list[PhotoRecord]:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        rows = [photo for photo in self.photos.values() if photo.has_url]
        if query:
            rows = [
                photo
                for photo in rows
                if query.lower() in photo.original_name.lower()
            ]
        return sorted(rows, key=lambda p: (p.created_at, str(p.id)), reverse=True)

    def list_after(
        self, cursor: PhotoRecord | None, limit: int, query: str | None
    ) -> list[PhotoRecord]:
        rows = self._visible(query)
        if cursor is not None:
            key = (cursor.created_at, str(cursor.id))
            rows = [p for p in rows if (p.created_at, str(p.id)) < key]
        return rows[:limit]

    def list_page(
        self, offset: int, limit: int, query: str | None
    ) -> tuple[list[PhotoRecord], int]:
        rows = self._visible(query)
        return rows[offset : offset + limit], len(rows)

    def delete_photo(self, photo_id: UUID) -> None:
        self.photos.pop(photo_id, None)

    def delete_legacy_photos(self) -> int:
        legacy = [pid for pid, photo in self.photos.items() if not photo.has_url]
        for photo_id in legacy:
            del self.photos[photo_id]
        return len(legacy)

    def ping(self) -> None:
        return None


@dataclass
class FakeBlobStore(BlobStore):
    """Blob store that keeps objects in a dict keyed by URL."""

    objects: dict[str, bytes] = field(default_factory=dict)
    configured: bool = True
    fail_put: bool = False
    fail_delete: bool = False
    url_override: str | None = None
    deleted: list[str] = field(default_factory=list)

    def ensure_configured(self) -> None:
        if not self.configured:
            raise MissingConfigurationError(
                "Missing required environment variable: STORAGE_BUCKET"
            )

    async def put(self, name: str, data: bytes, content_type: str) -> str:
        if self.fail_put:
            raise RuntimeError("storage unavailable")
        url = f"https://blob.example.com/{uuid4().hex}-{name}"
        self.objects[url] = data
        if self.url_override is not None:
            return self.url_override
        return url

    async def delete(self, url: str) -> None:
        if self.fail_delete:
            raise RuntimeError("storage unavailable")
        self.deleted.append(url)
        self.objects.pop(url, None)

    async def read(self, url: str) -> bytes:
        return self.objects[url]

    async def close(self) -> None:
        return None


def multipart_body(
    parts: list[tuple[str, str | None, str | None, bytes]],
) -> bytes:
    """Encode (field name, filename, content type, payload) tuples."""
    chunks = []
    for name, filename, content_type, payload in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        headers = f"Content-Disposition: {disposition}\r\n"
        if content_type is not None:
            headers += f"Content-Type: {content_type}\r\n"
        chunks.append(
            f"--{BOUNDARY}\r\n{headers}\r\n".encode() + payload + b"\r\n"
        )
    chunks.append(f"--{BOUNDARY}--\r\n".encode())
    return b"".join(chunks)


MULTIPART_CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"


def basic_auth(user: str = "admin", password: str = "secret") -> dict[str, str]:
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture(autouse=True)
def reset_rate_limits():  # type: ignore[no-untyped-def]
    limiter.reset()
    limiter.enabled = True
    yield
    limiter.reset()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service.role.key",
        admin_user="admin",
        admin_pass="secret",
        storage_bucket="photos",
        max_file_mb=1,
    )


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def container(
    settings: Settings,
    photo_repository: InMemoryPhotoRepository,
    blob_store: FakeBlobStore,
) -> AppContainer:
    return build_services(settings, photo_repository, blob_store)
