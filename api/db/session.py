"""Engine/session handle for the embedded SQL store."""
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class StorageError(Exception):
    """Any storage failure, tagged with the operation that raised it."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


def _ensure_sqlite_dir(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    database = parsed.database or ""
    if database and database != ":memory:":
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


class Storage:
    """Explicit database handle shared by the seed loader and the routers."""

    def __init__(self, url: str) -> None:
        self.url = url
        connect_args = {}
        if make_url(url).get_backend_name() == "sqlite":
            # sync routes run in a threadpool
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(url, future=True, connect_args=connect_args)
        self._sessionmaker = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True
        )
        self._closed = False

    @classmethod
    def open(cls, url: str) -> "Storage":
        """Open (or create) the database and make sure both tables exist."""
        from . import models  # noqa: F401  # ensure models are imported for metadata

        try:
            _ensure_sqlite_dir(url)
            storage = cls(url)
            Base.metadata.create_all(bind=storage.engine)
            with storage.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError("open", str(exc)) from exc
        return storage

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Iterator[Session]:
        session: Session = self._sessionmaker()
        try:
            yield session
        finally:
            session.close()

    def close(self) -> None:
        if self._closed:
            return
        self.engine.dispose()
        self._closed = True
