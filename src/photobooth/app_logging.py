"""Logging configuration helpers."""

import logging

_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the ``photobooth`` logger.

    Safe to call repeatedly: the level is updated, handlers are not duplicated.
    """
    logger = logging.getLogger("photobooth")
    logger.setLevel(level.upper())
    # httpx logs every request line at INFO, storage keys included.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
