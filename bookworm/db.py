from pathlib import Path
from typing import Generator, Optional

from fastapi import Depends, Request
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

import bookworm.models  # noqa: F401  registers tables on SQLModel.metadata
from bookworm.config import Settings, get_settings


def _build_sqlite_url(db_path: str) -> str:
    return f"sqlite:///{db_path}"


def _enable_sqlite_pragmas(engine) -> None:
    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()


class CatalogStore:
    """Handle on the catalog database, passed to whoever needs to query it."""

    def __init__(self, engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CatalogStore":
        settings = settings or get_settings()
        db_file = Path(settings.db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            _build_sqlite_url(settings.db_path),
            connect_args={"check_same_thread": False},
        )
        _enable_sqlite_pragmas(engine)
        return cls(engine)

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        SQLModel.metadata.drop_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_session(store: CatalogStore = Depends(get_store)) -> Generator[Session, None, None]:
    with store.session() as session:
        yield session
