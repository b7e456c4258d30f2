"""Engine and session management for the registration store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, make_url, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from traindesk.logging import sanitize_for_log
from traindesk.registrations.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

MEMORY_URL = ":memory:"


def _enable_sqlite_pragmas(dbapi_connection: Any, _connection_record: object) -> None:
    # WAL lets readers proceed while a decision is being written
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the SQLAlchemy engine that every repository shares.

    ``url`` is any SQLAlchemy URL. ``":memory:"`` gives a private in-memory
    SQLite database whose single connection is shared across threads, which
    is what the API tests run against. SQLite files get WAL mode and foreign
    keys; server databases get pre-ping so dropped connections are replaced.
    """

    def __init__(self, url: str = "sqlite:///traindesk.db") -> None:
        self.url = url
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.url == MEMORY_URL or make_url(self.url).get_backend_name() == "sqlite"

    def _create_engine(self) -> Engine:
        if self.url == MEMORY_URL:
            engine = create_engine(
                "sqlite://",
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        elif self.is_sqlite:
            path = make_url(self.url).database
            if path and path != MEMORY_URL:
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(self.url, connect_args={"check_same_thread": False})
        else:
            return create_engine(self.url, pool_pre_ping=True)

        event.listen(engine, "connect", _enable_sqlite_pragmas)
        return engine

    @property
    def engine(self) -> Engine:
        """The engine, created on first use."""
        if self._engine is None:
            self._engine = self._create_engine()
            logger.info("Connected registration store at %s", sanitize_for_log(self.url))
        return self._engine

    def create_tables(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Open a new session; the caller closes it."""
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions()

    def ping(self) -> bool:
        """Run ``SELECT 1`` to check the store answers."""
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._sessions = None
