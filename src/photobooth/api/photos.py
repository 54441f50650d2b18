"""Public photo API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from photobooth.api.admin import require_admin
from photobooth.api.rate_limits import admin_rate_limit, upload_rate_limit
from photobooth.domain.errors import MethodNotAllowedError
from photobooth.services.photos import serialize_photo, serialize_photo_detail

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/photos", tags=["photos"])


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(upload_rate_limit)],
)
async def upload_photo(request: Request) -> JSONResponse:
    """Accept a multipart upload with a single ``file`` field."""
    container: AppContainer = request.app.state.container
    photo = await container.upload_service.upload(
        request.headers.get("content-type"), request.stream()
    )
    return JSONResponse(serialize_photo(photo), status_code=status.HTTP_201_CREATED)


@router.api_route("/upload", methods=["GET", "PUT", "PATCH", "DELETE"])
async def upload_wrong_method() -> None:
    raise MethodNotAllowedError()


@router.get("/list")
async def list_photos(
    request: Request,
    limit: str | None = None,
    cursor: str | None = None,
    q: str | None = None,
) -> dict[str, object]:
    """Return newest photos first, paged by cursor."""
    container: AppContainer = request.app.state.container
    page = await container.listing_service.list_by_cursor(cursor, limit, q)
    return {
        "items": [serialize_photo(photo) for photo in page.items],
        "nextCursor": str(page.next_cursor) if page.next_cursor else None,
    }


@router.delete(
    "", dependencies=[Depends(admin_rate_limit), Depends(require_admin)]
)
async def delete_legacy_photos(request: Request) -> dict[str, int]:
    """Remove metadata rows that never got a blob URL."""
    container: AppContainer = request.app.state.container
    return {"deletedCount": await container.deletion_service.delete_legacy()}


@router.get("/{photo_id}")
async def get_photo(photo_id: str, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return serialize_photo_detail(await container.listing_service.get_photo(photo_id))
