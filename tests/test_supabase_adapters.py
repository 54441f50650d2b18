"""Tests for Supabase adapter implementations."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import httpx
import pytest

from photobooth.adapters.supabase_blob_store import SupabaseBlobStore
from photobooth.adapters.supabase_photo_repository import SupabasePhotoRepository
from photobooth.domain.errors import MissingConfigurationError, NotFoundError
from photobooth.domain.photos import NewPhoto, PhotoRecord


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None
    count: int | None = None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "delete": []}
    )
    count: int | None = None
    last_payload: object | None = None
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    @property
    def not_(self) -> "FakeTable":
        self.calls.append(("not", ()))
        return self

    def select(self, *args, **kwargs) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "select"
        self.calls.append(("select", (*args, kwargs.get("count"))))
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def _record(self, name: str, *args) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.calls.append((name, args))
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._record("eq", column, value)

    def neq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._record("neq", column, value)

    def is_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._record("is", column, value)

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._record("ilike", column, value)

    def or_(self, filters: str) -> "FakeTable":
        return self._record("or", filters)

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        return self._record("order", column, desc)

    def limit(self, count: int) -> "FakeTable":
        return self._record("limit", count)

    def range(self, start: int, end: int) -> "FakeTable":
        return self._record("range", start, end)

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data, count=self.count)

    def called(self, name: str) -> list[tuple[object, ...]]:
        return [args for call, args in self.calls if call == name]


@dataclass
class FakeBucket:
    uploads: list[tuple[str, bytes, dict[str, str]]] = field(default_factory=list)
    removed: list[list[str]] = field(default_factory=list)

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        self.uploads.append((path, file, file_options))

    def get_public_url(self, path: str) -> str:
        return f"https://example.supabase.co/storage/v1/object/public/photos/{path}"

    def remove(self, paths: list[str]) -> None:
        self.removed.append(paths)


@dataclass
class FakeStorage:
    bucket: FakeBucket = field(default_factory=FakeBucket)
    names: list[str] = field(default_factory=list)

    def from_(self, name: str) -> FakeBucket:
        self.names.append(name)
        return self.bucket


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(name: str = "cat.png", blob_url: str | None = "https://x/cat.png") -> dict[str, object]:
    return {
        "id": str(uuid4()),
        "original_name": name,
        "mime_type": "image/png",
        "size": 12,
        "blob_url": blob_url,
        "created_at": "2024-12-20T12:00:00.123456+00:00",
        "updated_at": "2024-12-20T12:00:00.123456+00:00",
    }


def test_create_photo_inserts_row() -> None:
    client = FakeSupabaseClient()
    row = _row()
    client.table("photos").queue("insert", [row])

    repository = SupabasePhotoRepository(client)
    created = repository.create_photo(
        NewPhoto(original_name="cat.png", mime_type="image/png", size=12, blob_url="https://x/cat.png")
    )

    assert str(created.id) == row["id"]
    assert created.created_at.tzinfo is not None
    assert client.table("photos").last_payload == {
        "original_name": "cat.png",
        "mime_type": "image/png",
        "size": 12,
        "blob_url": "https://x/cat.png",
    }


def test_create_photo_without_returned_row_fails() -> None:
    repository = SupabasePhotoRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_photo(
            NewPhoto(original_name="a.png", mime_type="image/png", size=1, blob_url="https://x/a")
        )


def test_get_photo_missing_returns_none() -> None:
    repository = SupabasePhotoRepository(FakeSupabaseClient())

    assert repository.get_photo(uuid4()) is None


def test_list_after_filters_legacy_and_escapes_search() -> None:
    client = FakeSupabaseClient()
    table = client.table("photos")
    table.queue("select", [_row("cat_1.png")])
    cursor = PhotoRecord(
        id=uuid4(),
        original_name="anchor.png",
        mime_type="image/png",
        size=1,
        blob_url="https://x/anchor.png",
        created_at=datetime(2024, 12, 20, 12, 0, tzinfo=UTC),
    )

    repository = SupabasePhotoRepository(client)
    rows = repository.list_after(cursor, 11, "50%_off")

    assert [row.original_name for row in rows] == ["cat_1.png"]
    assert table.called("is") == [("blob_url", "null")]
    assert table.called("neq") == [("blob_url", "")]
    assert table.called("ilike") == [("original_name", "%50\\%\\_off%")]
    (keyset,) = table.called("or")
    assert keyset[0] == (
        'created_at.lt."2024-12-20T12:00:00+00:00",'
        f'and(created_at.eq."2024-12-20T12:00:00+00:00",id.lt.{cursor.id})'
    )
    assert table.called("order") == [("created_at", True), ("id", True)]
    assert table.called("limit") == [(11,)]


def test_list_page_uses_exact_count_and_range() -> None:
    client = FakeSupabaseClient()
    table = client.table("photos")
    table.count = 42
    table.queue("select", [_row(), _row("dog.png")])

    repository = SupabasePhotoRepository(client)
    rows, total = repository.list_page(20, 10, None)

    assert len(rows) == 2
    assert total == 42
    assert table.called("range") == [(20, 29)]
    assert table.called("select")[0][-1] == "exact"
    assert table.called("ilike") == []


def test_delete_legacy_photos_counts_deleted_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("photos")
    table.queue("delete", [_row(blob_url=None), _row(blob_url="")])

    repository = SupabasePhotoRepository(client)

    assert repository.delete_legacy_photos() == 2
    assert table.called("or") == [('blob_url.is.null,blob_url.eq.""',)]


def test_delete_photo_filters_by_id() -> None:
    client = FakeSupabaseClient()
    photo_id = uuid4()

    SupabasePhotoRepository(client).delete_photo(photo_id)

    assert client.table("photos").called("eq") == [("id", str(photo_id))]


def _blob_store(client: FakeSupabaseClient, handler=None, bucket: str | None = "photos") -> SupabaseBlobStore:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler or (lambda request: httpx.Response(200)))
    return SupabaseBlobStore(
        client=client,
        bucket=bucket,
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_blob_store_put_returns_public_url() -> None:
    client = FakeSupabaseClient()
    store = _blob_store(client)

    url = asyncio.run(store.put("../my cat.png", b"data", "image/png"))

    (path, data, options) = client.storage.bucket.uploads[0]
    assert path.endswith("-.._my cat.png")
    assert "/" not in path
    assert data == b"data"
    assert options == {"content-type": "image/png", "upsert": "false"}
    assert url.endswith(path)
    assert client.storage.names == ["photos"]


def test_blob_store_without_bucket() -> None:
    store = _blob_store(FakeSupabaseClient(), bucket=None)

    with pytest.raises(MissingConfigurationError):
        store.ensure_configured()


def test_blob_store_delete_uses_object_key() -> None:
    client = FakeSupabaseClient()
    store = _blob_store(client)
    url = "https://example.supabase.co/storage/v1/object/public/photos/abc-my%20cat.png"

    asyncio.run(store.delete(url))

    assert client.storage.bucket.removed == [["abc-my cat.png"]]


def test_blob_store_object_key_rejects_foreign_url() -> None:
    store = _blob_store(FakeSupabaseClient())

    with pytest.raises(ValueError):
        store.object_key("https://elsewhere.example.com/cat.png")


def test_blob_store_read() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("missing.png"):
            return httpx.Response(404)
        return httpx.Response(200, content=b"bytes")

    store = _blob_store(FakeSupabaseClient(), handler)

    assert asyncio.run(store.read("https://cdn.example.com/cat.png")) == b"bytes"
    with pytest.raises(NotFoundError):
        asyncio.run(store.read("https://cdn.example.com/missing.png"))
    asyncio.run(store.close())
