"""Logging setup shared by the console and the sandbox backend."""

import logging

from ukt_console.app.core.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    settings = get_settings()
    logging.basicConfig(level=level or settings.log_level, format=LOG_FORMAT)
    return logging.getLogger("ukt_console")
