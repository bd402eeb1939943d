import logging
import random
from typing import List, Optional, Sequence, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from bookworm.config import PopularityWeights, RecommendationThresholds, ScoringWeights
from bookworm.errors import InvalidInput, StoreFailure
from bookworm.schemas import GenreRef, RecommendationData, RecommendationItem
from bookworm.services.catalog_queries import BookStats, load_book_stats, load_read_history, load_user_ratings
from bookworm.services.preference_profile import PreferenceProfile, build_preference_profile
from bookworm.services.scoring import (
    fallback_reason,
    passes_quality_gate,
    personalized_reason,
    personalized_score,
    popularity_score,
)
from bookworm.services.user_ids import normalize_user_id

logger = logging.getLogger(__name__)


class RecommendationEngine:
    def __init__(
        self,
        scoring: Optional[ScoringWeights] = None,
        popularity: Optional[PopularityWeights] = None,
        thresholds: Optional[RecommendationThresholds] = None,
        rng: Optional[random.Random] = None,
    ):
        self.scoring = scoring or ScoringWeights()
        self.popularity = popularity or PopularityWeights()
        self.thresholds = thresholds or RecommendationThresholds()
        self.rng = rng or random.Random()

    def recommend(self, session: Session, user_id: str, limit: int) -> RecommendationData:
        normalized_user_id = normalize_user_id(user_id)
        if not normalized_user_id:
            raise InvalidInput("Invalid user ID")
        if limit < 1:
            raise InvalidInput("Limit must be a positive integer")

        try:
            return self._recommend(session, normalized_user_id, limit)
        except SQLAlchemyError as exc:
            logger.exception("Recommendation store access failed for user %s", normalized_user_id)
            raise StoreFailure(str(exc) or "Failed to generate recommendations") from exc

    def _recommend(self, session: Session, user_id: str, limit: int) -> RecommendationData:
        read_history = load_read_history(session, user_id)
        read_book_ids = [entry.book_id for entry in read_history]
        is_personalized = len(read_history) >= self.thresholds.min_read_books

        items: List[RecommendationItem] = []
        if is_personalized:
            profile = build_preference_profile(
                read_history,
                load_user_ratings(session, user_id),
                top_genre_count=self.thresholds.top_genre_count,
                default_rating=self.thresholds.default_user_rating,
            )
            items = self._personalized(session, profile, read_book_ids, limit)

        personalized_count = len(items)
        if personalized_count < limit:
            excluded = set(read_book_ids)
            excluded.update(item.id for item in items)
            items.extend(self._fallback(session, excluded, limit - personalized_count))

        logger.info(
            "Recommendations for user %s: personalized=%s read=%d personalized_items=%d fallback_items=%d",
            user_id,
            is_personalized,
            len(read_history),
            personalized_count,
            len(items) - personalized_count,
        )
        return RecommendationData(
            recommendations=items,
            is_personalized=is_personalized,
            books_read=len(read_history),
        )

    def _personalized(
        self,
        session: Session,
        profile: PreferenceProfile,
        read_book_ids: Sequence[str],
        limit: int,
    ) -> List[RecommendationItem]:
        candidates = load_book_stats(session, genre_ids=profile.top_genres, exclude_book_ids=read_book_ids)
        logger.debug("Personalized pool: %d candidates in genres %s", len(candidates), profile.top_genres)

        scored: List[Tuple[float, BookStats]] = []
        for stats in candidates:
            if not passes_quality_gate(stats.avg_rating, stats.shelved_count, profile.user_baseline, self.thresholds):
                continue
            score = personalized_score(stats.avg_rating, stats.review_count, stats.shelved_count, self.scoring)
            scored.append((score, stats))

        # Stable sort: equal (score, avg_rating) keep catalog order.
        scored.sort(key=lambda row: (row[0], row[1].avg_rating), reverse=True)

        items: List[RecommendationItem] = []
        for score, stats in scored[:limit]:
            reason = personalized_reason(
                genre_name=stats.genre.name,
                genre_read_count=profile.genre_counts.get(stats.genre.id, 0),
                avg_rating=stats.avg_rating,
                shelved_count=stats.shelved_count,
                thresholds=self.thresholds,
            )
            items.append(self._to_item(stats, reason, score=score, review_count=stats.review_count))
        return items

    def _fallback(self, session: Session, excluded_book_ids: Set[str], needed: int) -> List[RecommendationItem]:
        candidates = load_book_stats(session, exclude_book_ids=excluded_book_ids)
        logger.debug("Fallback pool: %d candidates for %d slots", len(candidates), needed)

        ranked = [
            (popularity_score(stats.avg_rating, stats.shelved_count, self.popularity), self.rng.random(), stats)
            for stats in candidates
        ]
        ranked.sort(key=lambda row: (row[0], row[1]), reverse=True)

        return [
            self._to_item(stats, fallback_reason(stats.genre.name, stats.avg_rating, self.thresholds))
            for _, _, stats in ranked[:needed]
        ]

    def _to_item(
        self,
        stats: BookStats,
        reason: str,
        score: Optional[float] = None,
        review_count: Optional[int] = None,
    ) -> RecommendationItem:
        return RecommendationItem(
            id=stats.book.id,
            title=stats.book.title,
            author=stats.book.author,
            cover_image=stats.book.cover_image,
            genre=GenreRef(id=stats.genre.id, name=stats.genre.name),
            avg_rating=stats.avg_rating,
            shelved_count=stats.shelved_count,
            review_count=review_count,
            score=score,
            reason=reason,
        )
