"""Photo deletion: single records and legacy cleanup."""

import asyncio
import logging
from dataclasses import dataclass

from photobooth.domain.errors import UpstreamError
from photobooth.services.photos import PhotoListingService, PhotoRepository
from photobooth.services.storage import BlobStore

logger = logging.getLogger(__name__)


@dataclass
class PhotoDeletionService:
    """Removes photos from the metadata store and, best effort, the blob store."""

    repository: PhotoRepository
    blob_store: BlobStore
    listing_service: PhotoListingService

    async def delete_one(self, photo_id: str) -> None:
        """Delete a photo by id.

        The blob is deleted first; a blob failure is logged and the metadata
        row is still removed, leaving at worst a dangling blob.
        """
        photo = await self.listing_service.get_photo(photo_id)
        if photo.has_url:
            try:
                await self.blob_store.delete(photo.blob_url)
            except Exception:
                logger.warning(
                    "Blob delete failed; continuing with metadata delete",
                    exc_info=True,
                    extra={"photo_id": str(photo.id), "blob_url": photo.blob_url},
                )
        try:
            await asyncio.to_thread(self.repository.delete_photo, photo.id)
        except Exception as exc:
            logger.exception("Metadata delete failed", extra={"photo_id": str(photo.id)})
            raise UpstreamError("Error deleting photo") from exc
        logger.info("Deleted photo", extra={"photo_id": str(photo.id)})

    async def delete_legacy(self) -> int:
        """Delete every row without a blob URL. The blob store is not touched."""
        try:
            deleted = await asyncio.to_thread(self.repository.delete_legacy_photos)
        except Exception as exc:
            logger.exception("Legacy cleanup failed")
            raise UpstreamError("Error deleting legacy photos") from exc
        logger.info("Deleted legacy photos", extra={"deleted_count": deleted})
        return deleted
