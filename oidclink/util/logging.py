"""Standard library logging for the API layer and scripts.

Domain code logs through logfire; modules outside it (routes, the error
handlers, the legacy migration) use ``logging.getLogger(__name__)``.
"""

import logging
import sys

from oidclink.config import Settings

# Loggers that would print request bodies, which carry client secrets
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack")


def setup_logging(settings: Settings) -> None:
    """Configure the root logger and the package logger.

    Args:
        settings: Application settings; ``debug`` selects DEBUG over INFO
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("oidclink").setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured for %s at %s",
        settings.environment,
        logging.getLevelName(level),
    )
