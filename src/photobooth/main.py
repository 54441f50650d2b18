"""Long-running server entrypoint (``photobooth`` console script)."""

import uvicorn

from photobooth.api.app import create_app
from photobooth.config import Settings
from photobooth.containers import build_container


def main() -> None:
    """Serve the app on ``PORT`` with uvicorn."""
    settings = Settings()
    app = create_app(build_container(settings))
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
