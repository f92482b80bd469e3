"""Logging setup for the clavix logger hierarchy."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingSettings

ROOT_LOGGER = "clavix"


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    settings: Optional[LoggingSettings] = None,
    console: Optional[Console] = None
) -> logging.Logger:
    """
    Configure the ``clavix`` logger.

    Args:
        settings: Logging settings (defaults to environment-derived values)
        console: Rich console used by the text handler (stderr by default)

    Returns:
        The configured package logger
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER)

    level = "DEBUG" if settings.debug else settings.level.upper()
    logger.setLevel(getattr(logging, level, logging.WARNING))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if settings.format.lower() == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=settings.debug,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.propagate = False
    return logger
