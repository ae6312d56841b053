"""
Logging setup.

Call setup_logging() once when the app starts; every module gets its
logger through get_logger(__name__).
"""

import logging
import sys
from typing import Optional

from app.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Attach a stdout handler to the root logger at the configured level."""
    global _configured
    settings = settings or get_settings()
    root = logging.getLogger()
    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
        _configured = True
    root.setLevel(settings.log_level.upper())

    # SQL echo only in debug mode
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a named logger instance."""
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
