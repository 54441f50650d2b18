"""Admin panel endpoints behind HTTP Basic auth."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from photobooth.api.admin_views import (
    render_dashboard,
    render_photo_detail,
    render_photo_list,
)
from photobooth.api.rate_limits import admin_rate_limit
from photobooth.domain.errors import NotFoundError, PhotoboothError, UpstreamError
from photobooth.domain.filenames import content_disposition
from photobooth.services.access import check_basic_auth
from photobooth.services.photos import normalize_query

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(admin_rate_limit)]
)
logger = logging.getLogger(__name__)


async def require_admin(request: Request) -> None:
    """Ensure requests carry valid Basic credentials."""
    container: AppContainer = request.app.state.container
    result = check_basic_auth(
        request.headers.get("authorization"),
        container.settings.admin_user,
        container.settings.admin_pass,
    )
    if not result.authorized:
        raise HTTPException(
            status_code=result.status,
            detail=result.message,
            headers=result.headers or None,
        )


@router.get("", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
async def dashboard() -> HTMLResponse:
    """Admin landing page."""
    return HTMLResponse(render_dashboard())


@router.get(
    "/photos", response_class=HTMLResponse, dependencies=[Depends(require_admin)]
)
async def photo_list(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    q: str | None = None,
    deleted: str | None = None,
) -> HTMLResponse:
    """Paginated, searchable photo table."""
    container: AppContainer = request.app.state.container
    result = await container.listing_service.list_by_page(page, limit, q)
    return HTMLResponse(
        render_photo_list(result, normalize_query(q), deleted=deleted == "1")
    )


@router.get(
    "/photos/{photo_id}",
    response_class=HTMLResponse,
    dependencies=[Depends(require_admin)],
)
async def photo_detail(photo_id: str, request: Request) -> HTMLResponse:
    container: AppContainer = request.app.state.container
    photo = await container.listing_service.get_photo(photo_id)
    return HTMLResponse(render_photo_detail(photo))


@router.get("/photos/{photo_id}/download", dependencies=[Depends(require_admin)])
async def download_photo(photo_id: str, request: Request) -> Response:
    """Return the photo bytes as an attachment."""
    container: AppContainer = request.app.state.container
    photo = await container.listing_service.get_photo(photo_id)
    if not photo.has_url:
        raise NotFoundError("Photo file not available")
    try:
        content = await container.blob_store.read(photo.blob_url)
    except PhotoboothError:
        raise
    except Exception as exc:
        logger.exception("Blob read failed", extra={"photo_id": str(photo.id)})
        raise UpstreamError("Error fetching photo file") from exc
    return Response(
        content=content,
        media_type=photo.mime_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(photo.original_name)},
    )


@router.post("/photos/{photo_id}/delete", dependencies=[Depends(require_admin)])
async def delete_photo(photo_id: str, request: Request) -> RedirectResponse:
    """Delete a photo from the HTML form and go back to the list."""
    container: AppContainer = request.app.state.container
    await container.deletion_service.delete_one(photo_id)
    return RedirectResponse(
        "/admin/photos?deleted=1", status_code=status.HTTP_302_FOUND
    )
