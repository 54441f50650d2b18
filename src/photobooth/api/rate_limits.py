"""Per-client request throttling for uploads and admin routes."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

UPLOAD_RATE_LIMIT = "50/15minutes"
ADMIN_RATE_LIMIT = "100/15minutes"

limiter = Limiter(key_func=get_remote_address)


# Used as route dependencies so the limit is counted before the auth check runs.
@limiter.limit(
    UPLOAD_RATE_LIMIT,
    error_message="Too many upload requests, please try again later.",
)
async def upload_rate_limit(request: Request) -> None:
    return None


@limiter.limit(
    ADMIN_RATE_LIMIT,
    error_message="Too many admin requests, please try again later.",
)
async def admin_rate_limit(request: Request) -> None:
    return None
