from datetime import datetime, timezone

from bookworm.services.dashboard_stats import collect_dashboard_stats, months_ago


def test_months_ago_clamps_day_to_target_month():
    assert months_ago(datetime(2026, 8, 31, 12, 0), 6) == datetime(2026, 2, 28, 12, 0)
    assert months_ago(datetime(2026, 3, 15), 6) == datetime(2025, 9, 15)
    assert months_ago(datetime(2026, 1, 5), 1) == datetime(2025, 12, 5)


def test_dashboard_stats_aggregates_catalog(db_session, catalog):
    fantasy = catalog.genre("Fantasy")
    scifi = catalog.genre("Sci-Fi")
    first = catalog.book("A", fantasy)
    second = catalog.book("B", fantasy)
    summer = catalog.book("C", scifi, created_at=datetime(2025, 8, 10, tzinfo=timezone.utc))
    catalog.book("D", scifi, created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))

    admin = catalog.user("admin", role="admin")
    reader = catalog.user("reader")
    catalog.user("old", created_at=datetime(2025, 6, 1, tzinfo=timezone.utc))

    catalog.review(first, reader, 5)
    catalog.review(first, admin, 4)
    catalog.review(second, reader, 3)
    catalog.review(summer, reader, 5, status="pending")

    catalog.shelve(reader, first, "read")
    catalog.shelve(reader, second, "reading")
    catalog.shelve(admin, first, "want")
    catalog.shelve(admin, summer, "want")

    stats = collect_dashboard_stats(db_session, now=datetime(2026, 1, 5, tzinfo=timezone.utc))

    overview = stats.overview
    assert overview.total_books == 4
    assert overview.total_users == 3
    assert overview.total_reviews == 4
    assert overview.pending_reviews == 1
    assert overview.recent_users == 2

    charts = stats.charts
    assert [(row.genre, row.count) for row in charts.books_per_genre] == [("Fantasy", 2), ("Sci-Fi", 2)]
    assert [(row.month, row.count) for row in charts.monthly_books] == [("Aug 2025", 1), ("Jan 2026", 2)]
    assert [(row.shelf, row.count) for row in charts.shelf_distribution] == [
        ("Read", 1),
        ("Currently Reading", 1),
        ("Want to Read", 2),
    ]
    assert [(row.role, row.count) for row in charts.user_roles] == [("ADMIN", 1), ("USER", 2)]
    assert [(row.title, row.avg_rating, row.total_reviews) for row in charts.top_rated_books] == [
        ("A", 4.5, 2),
        ("B", 3.0, 1),
    ]


def test_dashboard_stats_on_empty_store(db_session):
    stats = collect_dashboard_stats(db_session)
    assert stats.overview.total_books == 0
    assert stats.charts.books_per_genre == []
    assert stats.charts.top_rated_books == []
