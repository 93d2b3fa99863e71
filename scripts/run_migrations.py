#!/usr/bin/env python3
"""Apply or roll back the accounts/identities schema with Logfire tracking.

Usage:
    run_migrations.py                 # upgrade to head
    run_migrations.py upgrade <rev>   # upgrade to a revision
    run_migrations.py downgrade <rev> # roll back to a revision
"""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from tether.config import Settings
from tether.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main(argv: list[str]) -> int:
    """Run the requested migration and log any errors to Logfire."""
    settings = Settings()
    configure_logfire(settings)

    action = argv[0] if argv else "upgrade"
    revision = argv[1] if len(argv) > 1 else "head"
    if action not in ("upgrade", "downgrade"):
        logfire.error("Unknown migration action", action=action)
        return 2
    if action == "downgrade" and len(argv) < 2:
        logfire.error("Downgrade needs an explicit target revision")
        return 2

    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)

    with logfire.span("migrations.{action}", action=action, revision=revision):
        try:
            getattr(command, action)(alembic_cfg, revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                action=action,
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Re-raise so the deploy fails instead of serving a broken schema
            raise

    logfire.info("Database migrations completed", action=action, revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
