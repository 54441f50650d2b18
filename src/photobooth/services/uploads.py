"""Upload pipeline: multipart stream to blob store, then one metadata row."""

import asyncio
import logging
from collections.abc import AsyncIterable
from dataclasses import dataclass

from photobooth.domain.errors import BlobWriteFailedError, MetadataWriteFailedError
from photobooth.domain.photos import ALLOWED_MIME_TYPES, NewPhoto, PhotoRecord
from photobooth.services.multipart import multipart_boundary, read_file_part
from photobooth.services.photos import PhotoRepository
from photobooth.services.storage import BlobStore, is_secure_url

UPLOAD_FIELD = "file"

logger = logging.getLogger(__name__)


@dataclass
class UploadService:
    """Accepts a single image upload.

    The metadata insert happens exactly once and only after the blob write
    returned a usable URL. A failed insert leaves an orphaned blob, which is
    logged with its URL.
    """

    photo_repository: PhotoRepository
    blob_store: BlobStore
    max_bytes: int

    async def upload(
        self, content_type: str | None, stream: AsyncIterable[bytes]
    ) -> PhotoRecord:
        """Validate, store and record one uploaded photo."""
        self.blob_store.ensure_configured()
        multipart_boundary(content_type)
        incoming = await read_file_part(
            stream,
            content_type,
            field_name=UPLOAD_FIELD,
            allowed_mime_types=ALLOWED_MIME_TYPES,
            max_bytes=self.max_bytes,
        )

        try:
            blob_url = await self.blob_store.put(
                incoming.filename, incoming.data, incoming.mime_type
            )
        except Exception as exc:
            logger.exception(
                "Blob write failed", extra={"original_name": incoming.filename}
            )
            raise BlobWriteFailedError() from exc
        if not is_secure_url(blob_url):
            logger.error(
                "Blob store returned an unusable URL",
                extra={"original_name": incoming.filename, "blob_url": blob_url},
            )
            raise BlobWriteFailedError()

        try:
            photo = await asyncio.to_thread(
                self.photo_repository.create_photo,
                NewPhoto(
                    original_name=incoming.filename,
                    mime_type=incoming.mime_type,
                    size=incoming.size,
                    blob_url=blob_url,
                ),
            )
        except Exception as exc:
            logger.exception(
                "Metadata insert failed; blob left orphaned",
                extra={"blob_url": blob_url},
            )
            raise MetadataWriteFailedError() from exc
        logger.info(
            "Stored photo",
            extra={"photo_id": str(photo.id), "size": photo.size},
        )
        return photo
