"""Apply the alembic revisions shipped inside the package."""
from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def build_alembic_config(database_url: str) -> Config:
    """Return an alembic config pointing at the bundled script directory."""

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats % specially
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


def head_revision() -> str:
    script = ScriptDirectory.from_config(build_alembic_config("sqlite://"))
    return script.get_current_head()


def current_revision(connection: Connection) -> str | None:
    return MigrationContext.configure(connection).get_current_revision()


def upgrade_database(database_url: str, *, connection: Connection | None = None) -> str:
    """Bring the schema at ``database_url`` to the latest revision.

    Already-applied revisions are skipped via the ``alembic_version`` table, so
    calling this on every startup is safe. Returns the resulting revision.
    """

    config = build_alembic_config(database_url)
    if connection is not None:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
        revision = current_revision(connection)
    else:
        command.upgrade(config, "head")
        engine = create_engine(database_url)
        try:
            with engine.connect() as conn:
                revision = current_revision(conn)
        finally:
            engine.dispose()
    logger.info(f"Database schema at revision {revision}")
    return revision
