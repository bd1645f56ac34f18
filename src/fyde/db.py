"""Database — SQLite engine, pragmas, migrations, serialized sessions.

All access goes through one DBAPI connection (``StaticPool``).  The
:meth:`Database.session` unit of work holds an exclusive lock for its
whole lifetime, so statements from different threads never interleave
on the shared connection.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util.exc import CommandError
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from fyde.exceptions import StorageInitError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def migration_config(connection: Connection | None = None) -> Config:
    """Build an in-memory alembic ``Config`` pointing at the bundled migrations."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


def head_revision() -> str | None:
    """Return the latest revision shipped with the package."""
    return ScriptDirectory.from_config(migration_config()).get_current_head()


def _create_engine(db_path: Path | None) -> Engine:
    url = f"sqlite:///{db_path}" if db_path is not None else "sqlite://"
    engine = create_engine(
        url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: object, connection_record: object) -> None:
        cursor = dbapi_connection.cursor()  # type: ignore[union-attr]
        cursor.execute("PRAGMA journal_mode=WAL")
        result = cursor.fetchone()
        if result[0].lower() not in ("wal", "memory"):
            logger.warning("WAL mode not active, got: %s", result[0])
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    return engine


class Database:
    """Owns the engine and serializes every unit of work behind one lock."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._lock = threading.Lock()

    @classmethod
    def open(cls, db_path: str | Path | None = None) -> Database:
        """Open (or create) the database and migrate it to the latest schema.

        ``db_path=None`` opens an ephemeral in-memory database.
        Raises :class:`StorageInitError` if the connection, a pragma or any
        migration fails.
        """
        path = Path(db_path) if db_path is not None else None
        try:
            engine = _create_engine(path)
        except SQLAlchemyError as exc:
            msg = f"failed to open the database file: {exc}"
            raise StorageInitError(msg) from exc

        db = cls(engine)
        try:
            db.migrate()
        except StorageInitError:
            engine.dispose()
            raise
        return db

    @property
    def engine(self) -> Engine:
        return self._engine

    def migrate(self) -> None:
        """Apply every pending migration up to ``head``."""
        with self._lock:
            try:
                with self._engine.begin() as connection:
                    command.upgrade(migration_config(connection), "head")
            except (CommandError, SQLAlchemyError) as exc:
                msg = f"failed to run the storage migration job: {exc}"
                raise StorageInitError(msg) from exc
        logger.debug("Database migrated to revision %s", self.current_revision())

    def current_revision(self) -> str | None:
        """Return the schema revision recorded in the database."""
        with self._lock, self._engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Exclusive unit of work: commit on success, roll back on error."""
        with self._lock, Session(self._engine, expire_on_commit=False) as session:
            try:
                yield session
                session.commit()
            except BaseException:
                session.rollback()
                raise

    def close(self) -> None:
        """Dispose of the engine and its connection."""
        self._engine.dispose()
