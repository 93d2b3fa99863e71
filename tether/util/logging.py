"""Stdlib logging for the HTTP layer.

Routes log through ``logging.getLogger(__name__)``; services use logfire.
"""

import logging
import sys

from tether.config import Settings

# Loggers that are noisy at INFO (one line per provider request or query)
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def setup_logging(settings: Settings) -> None:
    """Configure the root logger.

    Args:
        settings: Application settings; ``debug`` switches to DEBUG level
    """
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured for %s", settings.environment
    )
