"""
Schema migrations runner.

Wraps the Alembic revision chain shipped in `protocol_service/migrations` so
the service can bring its storage up to date at startup. Alembic records the
applied revision in ``alembic_version``; upgrading to head applies only the
revisions after it, and each revision also skips structures that already
exist, so repeated runs are no-ops.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection, Engine

from protocol_service.config import Settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def build_alembic_config(settings: Settings) -> Config:
    """Return an Alembic config pointing at the packaged migrations."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats '%' specially
    cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    cfg.attributes["configure_logger"] = False
    return cfg


@contextmanager
def _connection(settings: Settings, engine: Optional[Engine]) -> Iterator[Connection]:
    if engine is not None:
        with engine.begin() as connection:
            yield connection
        return
    throwaway = create_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        with throwaway.begin() as connection:
            yield connection
    finally:
        throwaway.dispose()


def _script(settings: Settings) -> ScriptDirectory:
    return ScriptDirectory.from_config(build_alembic_config(settings))


def revision_chain(settings: Settings) -> List[str]:
    """Every revision id from base to head, in application order."""
    revs = list(_script(settings).walk_revisions(base="base", head="heads"))
    revs.reverse()
    return [r.revision for r in revs]


def current_revision(settings: Settings, engine: Optional[Engine] = None) -> Optional[str]:
    """Return the applied revision, or None when the storage is at base."""
    with _connection(settings, engine) as connection:
        return MigrationContext.configure(connection).get_current_revision()


def pending_revisions(settings: Settings, engine: Optional[Engine] = None) -> List[str]:
    """Revisions not yet applied, in the order ``upgrade_to_head`` will run them."""
    current = current_revision(settings, engine)
    chain = revision_chain(settings)
    if current is None:
        return chain
    if current not in chain:
        raise RuntimeError(f"Database is at unknown revision {current!r}")
    return chain[chain.index(current) + 1:]


def upgrade_to_head(settings: Settings, engine: Optional[Engine] = None) -> List[str]:
    """Apply every pending revision in order and return the ids applied."""
    pending = pending_revisions(settings, engine)
    if not pending:
        logger.info("migrations_up_to_date: revision=%s", current_revision(settings, engine))
        return []
    for rev in pending:
        logger.info("migration_pending: revision=%s", rev)
    _run(settings, engine, lambda cfg: command.upgrade(cfg, "head"))
    logger.info("migrations_applied: count=%s head=%s", len(pending), pending[-1])
    return pending


def downgrade(settings: Settings, target: str = "base", engine: Optional[Engine] = None) -> None:
    """Step the schema back to ``target`` (``base`` drops every table)."""
    logger.info("migration_downgrade: target=%s", target)
    _run(settings, engine, lambda cfg: command.downgrade(cfg, target))


def _run(settings: Settings, engine: Optional[Engine], action) -> None:
    cfg = build_alembic_config(settings)
    with _connection(settings, engine) as connection:
        cfg.attributes["connection"] = connection
        action(cfg)
