"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from photobooth.adapters.local_blob_store import UPLOADS_ROUTE, LocalBlobStore
from photobooth.api.admin import router as admin_router
from photobooth.api.errors import register_error_handlers
from photobooth.api.photos import router as photos_router
from photobooth.api.rate_limits import limiter
from photobooth.app_logging import configure_logging
from photobooth.config import parse_cors_origins
from photobooth.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    if not container.settings.admin_configured:
        logger.warning("ADMIN_USER or ADMIN_PASS not set; admin routes will return 500")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Photobooth", lifespan=lifespan)
    app.state.container = container
    limiter.enabled = container.settings.rate_limit_enabled
    app.state.limiter = limiter

    origins = parse_cors_origins(container.settings.cors_origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(photos_router)
    app.include_router(admin_router)

    if isinstance(container.blob_store, LocalBlobStore):
        app.mount(
            UPLOADS_ROUTE,
            StaticFiles(directory=container.blob_store.uploads_dir, check_dir=False),
            name="uploads",
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok", "timestamp": datetime.now(tz=UTC).isoformat()}

    @app.get("/api/health/db", response_model=None)
    async def health_db(request: Request) -> dict[str, bool] | JSONResponse:
        """Check that the metadata store answers a trivial query."""
        state_container: AppContainer = request.app.state.container
        try:
            await asyncio.to_thread(state_container.photo_repository.ping)
        except Exception:
            logger.exception("Database health check failed")
            return JSONResponse(
                {"ok": False, "error": "Database connection failed"}, status_code=500
            )
        return {"ok": True}

    return app
