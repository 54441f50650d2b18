"""Incremental multipart reader for single-file photo uploads."""

from collections.abc import AsyncIterable, Collection

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from photobooth.domain.errors import (
    FileTooLargeError,
    InvalidContentTypeError,
    InvalidMimeTypeError,
    MalformedUploadError,
    NoFileProvidedError,
)
from photobooth.domain.photos import IncomingFile


def multipart_boundary(content_type: str | None) -> bytes:
    """Return the boundary of a multipart/form-data content type."""
    if not content_type:
        raise InvalidContentTypeError()
    media_type, params = parse_options_header(content_type)
    if media_type != b"multipart/form-data":
        raise InvalidContentTypeError()
    boundary = params.get(b"boundary")
    if not boundary:
        raise InvalidContentTypeError()
    return boundary


class _FilePartCollector:
    """Parser callbacks that keep the first matching file part only."""

    def __init__(
        self, field_name: str, allowed_mime_types: Collection[str], max_bytes: int
    ) -> None:
        self.field_name = field_name
        self.allowed_mime_types = allowed_mime_types
        self.max_bytes = max_bytes
        self.file: IncomingFile | None = None
        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        self._capturing = False
        self._filename = ""
        self._mime_type = ""
        self._chunks: list[bytes] = []
        self._size = 0

    def callbacks(self) -> dict[str, object]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._header_field = b""
        self._header_value = b""

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        if self.file is not None:
            return
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        name = options.get(b"name", b"").decode("latin-1")
        raw_filename = options.get(b"filename")
        if name != self.field_name or not raw_filename:
            return
        mime_type = (
            self._headers.get(b"content-type", b"").decode("latin-1").strip().lower()
        )
        if mime_type not in self.allowed_mime_types:
            raise InvalidMimeTypeError()
        self._filename = raw_filename.decode("utf-8", errors="replace")
        self._mime_type = mime_type
        self._capturing = True

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if not self._capturing:
            return
        self._size += end - start
        if self._size > self.max_bytes:
            raise FileTooLargeError()
        self._chunks.append(data[start:end])

    def on_part_end(self) -> None:
        if not self._capturing:
            return
        self._capturing = False
        self.file = IncomingFile(
            filename=self._filename,
            mime_type=self._mime_type,
            data=b"".join(self._chunks),
        )
        self._chunks = []


async def read_file_part(
    stream: AsyncIterable[bytes],
    content_type: str | None,
    *,
    field_name: str,
    allowed_mime_types: Collection[str],
    max_bytes: int,
) -> IncomingFile:
    """Consume a multipart body and return the single file named ``field_name``.

    The stream is abandoned on the first MIME or size violation, so an
    oversized upload is never buffered past ``max_bytes``.
    """
    boundary = multipart_boundary(content_type)
    collector = _FilePartCollector(field_name, allowed_mime_types, max_bytes)
    parser = MultipartParser(boundary, collector.callbacks())
    try:
        async for chunk in stream:
            if chunk:
                parser.write(chunk)
        parser.finalize()
    except MultipartParseError as exc:
        raise MalformedUploadError() from exc
    if collector.file is None or collector.file.size == 0:
        raise NoFileProvidedError()
    return collector.file
