#!/usr/bin/env python3
"""Move subject and issuer out of the users table of an older installation.

Usage:
    python scripts/migrate_subject_issuer.py [--keep-columns]

The alembic migration does the same on ``upgrade``; this script is for
installations whose schema is not managed by alembic.
"""

import argparse
import sys

import logfire
from sqlalchemy import create_engine

from oidclink.config import Settings
from oidclink.persistence.database import sync_url
from oidclink.persistence.legacy import migrate_subject_and_issuer_from_user_table
from oidclink.util.logging import setup_logging
from oidclink.util.observability import configure_logfire


def main() -> int:
    """Run the legacy identity migration."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--keep-columns",
        action="store_true",
        help="copy the identities but leave the old columns in place",
    )
    args = parser.parse_args()

    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    engine = create_engine(sync_url(settings.database.url))

    try:
        with engine.begin() as connection:
            migrated = migrate_subject_and_issuer_from_user_table(
                connection, drop_columns=not args.keep_columns
            )
        logfire.info("Legacy identity migration completed", migrated=migrated)
        return 0

    except Exception as e:
        logfire.error(
            "Legacy identity migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
