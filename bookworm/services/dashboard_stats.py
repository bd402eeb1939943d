import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from bookworm.errors import StoreFailure
from bookworm.models import (
    REVIEW_APPROVED,
    REVIEW_PENDING,
    SHELF_READ,
    SHELF_READING,
    SHELF_WANT,
    Book,
    Genre,
    LibraryEntry,
    Review,
    User,
)
from bookworm.schemas import (
    DashboardCharts,
    DashboardData,
    DashboardOverview,
    GenreCount,
    MonthCount,
    RoleCount,
    ShelfCount,
    TopRatedBook,
)

logger = logging.getLogger(__name__)

SHELF_LABELS = {
    SHELF_WANT: "Want to Read",
    SHELF_READING: "Currently Reading",
    SHELF_READ: "Read",
}
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
RECENT_USER_DAYS = 7
MONTHLY_WINDOW = 6
TOP_RATED_LIMIT = 5


def months_ago(moment: datetime, months: int) -> datetime:
    """Shift back by calendar months, clamping the day to the target month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    next_month_start = datetime(year + (month == 12), month % 12 + 1, 1)
    last_day = (next_month_start - timedelta(days=1)).day
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def collect_dashboard_stats(session: Session, now: Optional[datetime] = None) -> DashboardData:
    now = now or datetime.now(timezone.utc)
    try:
        return DashboardData(
            overview=_overview(session, now),
            charts=DashboardCharts(
                books_per_genre=_books_per_genre(session),
                monthly_books=_monthly_books(session, now),
                shelf_distribution=_shelf_distribution(session),
                user_roles=_user_roles(session),
                top_rated_books=_top_rated_books(session),
            ),
        )
    except SQLAlchemyError as exc:
        logger.exception("Dashboard statistics query failed")
        raise StoreFailure("Failed to fetch dashboard statistics", error=str(exc)) from exc


def _count(session: Session, statement) -> int:
    return int(session.exec(statement).one() or 0)


def _overview(session: Session, now: datetime) -> DashboardOverview:
    recent_cutoff = now - timedelta(days=RECENT_USER_DAYS)
    return DashboardOverview(
        total_books=_count(session, select(func.count(Book.id))),
        total_users=_count(session, select(func.count(User.id))),
        total_reviews=_count(session, select(func.count(Review.id))),
        pending_reviews=_count(session, select(func.count(Review.id)).where(Review.status == REVIEW_PENDING)),
        recent_users=_count(session, select(func.count(User.id)).where(User.created_at >= recent_cutoff)),
    )


def _books_per_genre(session: Session) -> List[GenreCount]:
    statement = (
        select(Genre.name, func.count(Book.id).label("book_count"))
        .select_from(Book)
        .join(Genre, Book.genre_id == Genre.id)
        .group_by(Genre.id, Genre.name)
        .order_by(func.count(Book.id).desc(), Genre.name)
    )
    return [GenreCount(genre=name, count=int(count)) for name, count in session.exec(statement).all()]


def _monthly_books(session: Session, now: datetime) -> List[MonthCount]:
    since = months_ago(now, MONTHLY_WINDOW)
    created = session.exec(select(Book.created_at).where(Book.created_at >= since)).all()
    buckets: Counter = Counter((value.year, value.month) for value in created)
    ordered: List[Tuple[Tuple[int, int], int]] = sorted(buckets.items())
    return [
        MonthCount(month=f"{MONTH_NAMES[month - 1]} {year}", count=count)
        for (year, month), count in ordered
    ]


def _shelf_distribution(session: Session) -> List[ShelfCount]:
    statement = (
        select(LibraryEntry.shelf, func.count(LibraryEntry.id))
        .group_by(LibraryEntry.shelf)
        .order_by(LibraryEntry.shelf)
    )
    return [
        ShelfCount(shelf=SHELF_LABELS.get(shelf, shelf), count=int(count))
        for shelf, count in session.exec(statement).all()
    ]


def _user_roles(session: Session) -> List[RoleCount]:
    statement = select(User.role, func.count(User.id)).group_by(User.role).order_by(User.role)
    return [RoleCount(role=(role or "").upper(), count=int(count)) for role, count in session.exec(statement).all()]


def _top_rated_books(session: Session) -> List[TopRatedBook]:
    avg_rating = func.avg(Review.rating)
    total_reviews = func.count(Review.id)
    statement = (
        select(Book.title, avg_rating.label("avg_rating"), total_reviews.label("total_reviews"))
        .select_from(Review)
        .join(Book, Review.book_id == Book.id)
        .where(Review.status == REVIEW_APPROVED)
        .group_by(Book.id, Book.title)
        .order_by(avg_rating.desc(), total_reviews.desc(), Book.title)
        .limit(TOP_RATED_LIMIT)
    )
    return [
        TopRatedBook(title=title, avg_rating=round(float(avg), 1), total_reviews=int(total))
        for title, avg, total in session.exec(statement).all()
    ]
