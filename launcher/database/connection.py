from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from launcher.database.models import Base


def _enable_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy issue BEGIN itself so SAVEPOINT works on pysqlite."""

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, _record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """The target settings store: one SQLite file, opened lazily.

    Constructing a ``Database`` does not touch the disk; the file appears on
    the first connection. The migrator relies on that to check for an
    existing store before anything creates one.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def url(self) -> str:
        return f"sqlite:///{self.path}"

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            # Ensure the directory for the database exists
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_engine(
                self.url,
                echo=False,  # Set to True for SQL debugging
                pool_pre_ping=True,
                connect_args={
                    "check_same_thread": False,
                    "timeout": 20,  # 20 second timeout for database locks
                },
            )
            _enable_savepoints(self._engine)
        return self._engine

    def exists(self) -> bool:
        return self.path.exists()

    def init_db(self) -> None:
        """Initialize the database, creating tables if they don't exist"""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """A transaction: committed on normal exit, rolled back on any error"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self.engine
            )
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except BaseException:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        """Release pooled connections so the file can be moved or deleted."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
