"""Migration Runner — `python -m ledger.migrate` upgrades the database to head.

Invariants:
    - Uses the same Settings.database_url and version table as the API
    - Script location is backend/alembic (source checkout or editable install)
    - ensure_schema_version passes only when the required revision is applied,
      i.e. it is a current head or an ancestor of one
"""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from ledger.config import get_settings
from ledger.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

SCRIPT_LOCATION = Path(__file__).resolve().parent.parent / "alembic"


class SchemaVersionError(RuntimeError):
    """Database schema is older than the revision this build requires."""


def build_alembic_config(database_url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    # configparser interpolation: escape percent-encoded credentials
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def _current_heads(connection: Connection, version_table: str) -> tuple[str, ...]:
    context = MigrationContext.configure(
        connection, opts={"version_table": version_table},
    )
    return context.get_current_heads()


def applied_revisions(script: ScriptDirectory, heads: tuple[str, ...]) -> set[str]:
    """Every revision reachable from the current heads down to base."""
    applied: set[str] = set()
    for head in heads:
        applied.update(rev.revision for rev in script.iterate_revisions(head, "base"))
    return applied


async def ensure_schema_version(
    engine: AsyncEngine, min_revision: str, version_table: str = "alembic_version",
) -> None:
    """Raise SchemaVersionError unless min_revision is applied."""
    async with engine.connect() as conn:
        heads = await conn.run_sync(_current_heads, version_table)

    script = ScriptDirectory(str(SCRIPT_LOCATION))
    if min_revision not in applied_revisions(script, heads):
        raise SchemaVersionError(
            f"database schema at {', '.join(heads) or 'base'} "
            f"is older than required revision {min_revision}",
        )
    logger.info(f"Database schema at {', '.join(heads)}, requires {min_revision}")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    command.upgrade(build_alembic_config(settings.database_url), "head")
    logger.info("Migration applied successfully")


if __name__ == "__main__":
    main()
