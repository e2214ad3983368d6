"""Logging setup for applications embedding the jigsaw core."""

import logging
from typing import Optional

from .config import Settings, get_settings

PACKAGE_LOGGER = "jigsaw"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Optional[Settings] = None, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Apply the configured log level to the package logger.

    The root logger is left untouched so the host application keeps control
    of its own handlers.

    Args:
        settings: Settings to read LOG_LEVEL from (cached settings if None).
        handler: Optional handler to attach. A stream handler is added when the
            package logger has none.

    Returns:
        The configured package logger.
    """
    settings = settings or get_settings()
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.LOG_LEVEL.upper())

    if handler is not None:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    elif not logger.handlers:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)

    return logger
