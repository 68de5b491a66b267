"""mockstore - Logging Configuration.

Structured console logging with configurable levels for development and
test runs.
"""

import logging
import logging.config
import sys
from typing import Any

from mockstore.core.config import Settings, get_settings

# Configure logger
logger = logging.getLogger(__name__)

# Track if logging has been configured
_logging_configured = False


def setup_logging(force: bool = False, settings: Settings | None = None) -> None:
    """Configure logging for the emulator based on settings.

    Args:
        force: If True, force reconfiguration even if already configured.
               Default is False to prevent duplicate handlers.
        settings: Settings to configure from, defaults to the cached settings.
    """
    global _logging_configured

    # Prevent duplicate configuration unless forced
    if _logging_configured and not force:
        return

    settings = settings or get_settings()

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": (
                    "%(asctime)s | %(name)s | %(levelname)s | "
                    "%(filename)s:%(lineno)d | %(funcName)s | %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {
                "format": "%(asctime)s | %(levelname)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": "detailed" if settings.debug else "simple",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "mockstore": {
                "level": settings.log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    _logging_configured = True

    logger.info(
        "Logging configured for %s environment with level %s",
        settings.environment,
        settings.log_level,
    )


def is_logging_configured() -> bool:
    """Report whether setup_logging() has already run."""
    return _logging_configured
