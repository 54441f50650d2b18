"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import ClientOptions, create_client

from photobooth.adapters.local_blob_store import LocalBlobStore
from photobooth.adapters.supabase_blob_store import SupabaseBlobStore
from photobooth.adapters.supabase_photo_repository import SupabasePhotoRepository
from photobooth.config import Settings
from photobooth.services.deletion import PhotoDeletionService
from photobooth.services.photos import PhotoListingService, PhotoRepository
from photobooth.services.storage import BlobStore
from photobooth.services.uploads import UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_repository: PhotoRepository
    blob_store: BlobStore
    upload_service: UploadService
    listing_service: PhotoListingService
    deletion_service: PhotoDeletionService
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings, photo_repository: PhotoRepository, blob_store: BlobStore
) -> AppContainer:
    """Wire services around already-constructed stores."""
    listing_service = PhotoListingService(
        repository=photo_repository,
        timeout_seconds=settings.list_timeout_seconds,
    )
    upload_service = UploadService(
        photo_repository=photo_repository,
        blob_store=blob_store,
        max_bytes=settings.max_file_bytes,
    )
    deletion_service = PhotoDeletionService(
        repository=photo_repository,
        blob_store=blob_store,
        listing_service=listing_service,
    )

    async def close_resources() -> None:
        await blob_store.close()

    return AppContainer(
        settings=settings,
        photo_repository=photo_repository,
        blob_store=blob_store,
        upload_service=upload_service,
        listing_service=listing_service,
        deletion_service=deletion_service,
        close_resources=close_resources,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    The Supabase client is created once here and shared by every request.
    """
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.request_timeout_seconds,
            storage_client_timeout=int(resolved_settings.request_timeout_seconds),
        ),
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    blob_store: BlobStore
    if resolved_settings.storage_backend == "local":
        blob_store = LocalBlobStore(
            uploads_dir=Path(resolved_settings.uploads_dir),
            public_base_url=resolved_settings.public_base_url,
        )
        blob_store.ensure_configured()
    else:
        blob_store = SupabaseBlobStore.create(
            supabase_client,
            resolved_settings.storage_bucket,
            timeout_seconds=resolved_settings.request_timeout_seconds,
        )
    return build_services(resolved_settings, photo_repository, blob_store)
