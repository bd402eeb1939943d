import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path("/tmp/bookworm-test.db")
os.environ["BOOKWORM_DB_PATH"] = str(TEST_DB_PATH)


def _remove_db_files():
    for suffix in ("", "-wal", "-shm"):
        path = Path(str(TEST_DB_PATH) + suffix)
        if path.exists():
            path.unlink()


@pytest.fixture(autouse=True)
def store():
    from bookworm.config import clear_settings_cache
    from bookworm.db import CatalogStore

    _remove_db_files()
    clear_settings_cache()
    catalog_store = CatalogStore.from_settings()
    catalog_store.drop_tables()
    catalog_store.create_tables()
    yield catalog_store
    catalog_store.dispose()


@pytest.fixture
def client(store):
    from bookworm.main import create_app

    app = create_app(store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(store):
    with store.session() as session:
        yield session


class CatalogBuilder:
    """Writes catalog rows with increasing timestamps so catalog order is predictable."""

    def __init__(self, session: Session):
        self.session = session
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _save(self, record):
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def genre(self, name: str):
        from bookworm.models import Genre

        return self._save(Genre(name=name, description=f"{name} books", created_at=self._tick()))

    def book(self, title: str, genre, author: str = "Anon", created_at=None):
        from bookworm.models import Book

        return self._save(
            Book(
                title=title,
                author=author,
                cover_image=f"https://covers.example/{title.replace(' ', '-').lower()}.jpg",
                genre_id=genre.id,
                created_at=created_at or self._tick(),
            )
        )

    def user(self, name: str = "reader", role: str = "user", created_at=None):
        from bookworm.models import User

        return self._save(
            User(
                name=name,
                email=f"{name.lower()}-{self._tick().timestamp():.0f}@example.com",
                role=role,
                created_at=created_at or self._tick(),
            )
        )

    def review(self, book, user, rating: int, status: str = "approved"):
        from bookworm.models import Review

        return self._save(
            Review(book_id=book.id, user_id=user.id, rating=rating, status=status, created_at=self._tick())
        )

    def shelve(self, user, book, shelf: str = "read"):
        from bookworm.models import LibraryEntry

        return self._save(LibraryEntry(user_id=user.id, book_id=book.id, shelf=shelf, created_at=self._tick()))

    def shelve_many(self, book, count: int, shelf: str = "want"):
        for index in range(count):
            self.shelve(self.user(f"shelver-{book.title}-{index}"), book, shelf=shelf)

    def review_many(self, book, ratings, status: str = "approved"):
        for index, rating in enumerate(ratings):
            self.review(book, self.user(f"critic-{book.title}-{index}"), rating, status=status)


@pytest.fixture
def catalog(db_session):
    return CatalogBuilder(db_session)
