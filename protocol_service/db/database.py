"""
Database engine and session management.

Builds the SQLAlchemy engine from explicit `Settings` and exposes a session
generator suitable for FastAPI dependencies.
"""
import logging
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from protocol_service.config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless enforcement is switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """Create an engine for ``settings.database_url``."""
    url = settings.database_url
    kwargs = {"echo": settings.echo_sql}
    if settings.is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite://"):
            # In-memory SQLite with StaticPool so the schema persists across connections
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    engine = create_engine(url, **kwargs)
    if settings.is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.info("database_engine_created: dialect=%s", engine.dialect.name)
    return engine


class Database:
    """Engine plus session factory bound to one configuration."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine = build_engine(settings)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def get_db(self) -> Iterator[Session]:
        """Yield a session and close it when the caller is done."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        """Create every table straight from model metadata (tests and tooling only)."""
        from protocol_service.db import models  # local import to avoid circular import at module load
        models.Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
