from dataclasses import dataclass
from typing import Collection, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from bookworm.models import REVIEW_APPROVED, SHELF_READ, Book, Genre, LibraryEntry, Review


@dataclass
class ReadBook:
    book_id: str
    genre_id: str


@dataclass
class BookStats:
    book: Book
    genre: Genre
    avg_rating: float = 0.0
    review_count: int = 0
    shelved_count: int = 0


def load_read_history(session: Session, user_id: str) -> List[ReadBook]:
    statement = (
        select(LibraryEntry.book_id, Book.genre_id)
        .select_from(LibraryEntry)
        .join(Book, LibraryEntry.book_id == Book.id)
        .where(LibraryEntry.user_id == user_id, LibraryEntry.shelf == SHELF_READ)
        .order_by(LibraryEntry.created_at, LibraryEntry.id)
    )
    return [ReadBook(book_id=book_id, genre_id=genre_id) for book_id, genre_id in session.exec(statement).all()]


def load_user_ratings(session: Session, user_id: str) -> List[int]:
    statement = select(Review.rating).where(Review.user_id == user_id)
    return [int(rating) for rating in session.exec(statement).all()]


def load_book_stats(
    session: Session,
    genre_ids: Optional[Collection[str]] = None,
    exclude_book_ids: Collection[str] = (),
) -> List[BookStats]:
    """Join every matching book with its genre and aggregate counters.

    Ratings are averaged over approved reviews only; the shelf counter covers
    library entries on any shelf. Books without reviews or entries get zeros.
    Rows come back in catalog order (creation time, then id).
    """
    review_stats = (
        select(
            Review.book_id.label("book_id"),
            func.avg(Review.rating).label("avg_rating"),
            func.count(Review.id).label("review_count"),
        )
        .where(Review.status == REVIEW_APPROVED)
        .group_by(Review.book_id)
        .subquery()
    )
    shelf_stats = (
        select(
            LibraryEntry.book_id.label("book_id"),
            func.count(LibraryEntry.id).label("shelved_count"),
        )
        .group_by(LibraryEntry.book_id)
        .subquery()
    )
    statement = (
        select(
            Book,
            Genre,
            review_stats.c.avg_rating,
            review_stats.c.review_count,
            shelf_stats.c.shelved_count,
        )
        .select_from(Book)
        .join(Genre, Book.genre_id == Genre.id)
        .outerjoin(review_stats, review_stats.c.book_id == Book.id)
        .outerjoin(shelf_stats, shelf_stats.c.book_id == Book.id)
    )
    if genre_ids is not None:
        if not genre_ids:
            return []
        statement = statement.where(Book.genre_id.in_(list(genre_ids)))
    if exclude_book_ids:
        statement = statement.where(Book.id.not_in(list(exclude_book_ids)))
    statement = statement.order_by(Book.created_at, Book.id)

    rows = session.exec(statement).all()
    return [
        BookStats(
            book=book,
            genre=genre,
            avg_rating=float(avg_rating or 0.0),
            review_count=int(review_count or 0),
            shelved_count=int(shelved_count or 0),
        )
        for book, genre, avg_rating, review_count, shelved_count in rows
    ]
