from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel


SHELF_WANT = "want"
SHELF_READING = "reading"
SHELF_READ = "read"

REVIEW_APPROVED = "approved"
REVIEW_PENDING = "pending"

ROLE_ADMIN = "admin"
ROLE_USER = "user"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class Genre(SQLModel, table=True):
    __tablename__ = "genres"
    __table_args__ = (UniqueConstraint("name", name="uq_genres_name"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    description: str = Field(default="")
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Book(SQLModel, table=True):
    __tablename__ = "books"
    __table_args__ = (UniqueConstraint("title", name="uq_books_title"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    author: str
    description: str = Field(default="")
    summary: str = Field(default="")
    cover_image: str = Field(default="")
    genre_id: str = Field(foreign_key="genres.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class User(SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    email: str = Field(index=True)
    role: str = Field(default=ROLE_USER, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime(timezone=True))


class Review(SQLModel, table=True):
    __tablename__ = "reviews"

    id: str = Field(default_factory=new_id, primary_key=True)
    book_id: str = Field(foreign_key="books.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    rating: int = Field(ge=1, le=5)
    comment: str = Field(default="")
    status: str = Field(default=REVIEW_PENDING, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class LibraryEntry(SQLModel, table=True):
    __tablename__ = "library_entries"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_library_user_book"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    book_id: str = Field(foreign_key="books.id", index=True)
    shelf: str = Field(default=SHELF_WANT, index=True)
    progress: int = Field(default=0, ge=0, le=100)
    started_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    finished_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
