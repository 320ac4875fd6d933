#!/usr/bin/env python3
"""Apply alembic migrations up to head, reporting failures to Logfire.

Upgrading an older installation also moves subject and issuer out of the
users table (see oidclink.persistence.legacy).
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from oidclink.config import Settings
from oidclink.util.logging import setup_logging
from oidclink.util.observability import configure_logfire


def main(revision: str = "head") -> int:
    """Upgrade the database schema.

    Args:
        revision: Target alembic revision
    """
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    try:
        with logfire.span("Database migrations", revision=revision):
            command.upgrade(Config("alembic.ini"), revision)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container does not start with a broken schema
        raise


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
