"""Bring the vote store schema up to date before serving traffic."""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from venue_votes.db.session import Database

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def alembic_config(database: Database) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Percent signs in URLs would be read as ConfigParser interpolation
    config.set_main_option(
        "sqlalchemy.url",
        database.engine.url.render_as_string(hide_password=False).replace("%", "%%"),
    )
    return config


def run_migrations(database: Database) -> None:
    """Run ``alembic upgrade head``. A no-op when the schema is already current."""
    config = alembic_config(database)
    with database.engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
    logger.info("Vote store schema is up to date")
