"""Database handle: owns the engine and session factory for the vote store.

One ``Database`` is opened at process start, kept on ``app.state.database``
and disposed at shutdown. Request handlers receive sessions through the
``get_db`` dependency rather than reaching for a module-level global.
"""

import logging
from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: Engine = _create_engine(url, echo=echo)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self._session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def _create_engine(url: str, echo: bool = False) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_pre_ping=True)

    # SQLite: sessions are used from FastAPI's threadpool
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # Every session must see the same in-memory database
        kwargs["poolclass"] = StaticPool
    else:
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=echo, **kwargs)


def open_database(url: str, echo: bool = False) -> Database:
    """Open the vote store at ``url``, creating the SQLite directory if needed."""
    database = Database(url, echo=echo)
    logger.info("Vote store opened at %s", database.engine.url.render_as_string(hide_password=True))
    return database
