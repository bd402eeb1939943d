from bookworm.config import PopularityWeights, RecommendationThresholds, ScoringWeights

DEFAULT_SCORING = ScoringWeights()
DEFAULT_POPULARITY = PopularityWeights()
DEFAULT_THRESHOLDS = RecommendationThresholds()


def personalized_score(
    avg_rating: float,
    review_count: int,
    shelved_count: int,
    weights: ScoringWeights = DEFAULT_SCORING,
) -> float:
    return (
        weights.rating_weight * avg_rating
        + weights.review_weight * min(review_count, weights.review_cap)
        + weights.shelf_weight * min(shelved_count, weights.shelf_cap)
    )


def popularity_score(
    avg_rating: float,
    shelved_count: int,
    weights: PopularityWeights = DEFAULT_POPULARITY,
) -> float:
    return weights.rating_weight * avg_rating + weights.shelf_weight * min(shelved_count, weights.shelf_cap)


def passes_quality_gate(
    avg_rating: float,
    shelved_count: int,
    user_baseline: float,
    thresholds: RecommendationThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Unrated, unshelved books never make it into the personalized list."""
    if avg_rating >= user_baseline - thresholds.rating_slack:
        return True
    return shelved_count >= thresholds.popular_shelf_min


def personalized_reason(
    genre_name: str,
    genre_read_count: int,
    avg_rating: float,
    shelved_count: int,
    thresholds: RecommendationThresholds = DEFAULT_THRESHOLDS,
) -> str:
    if genre_read_count >= thresholds.genre_love_min:
        return f"Matches your love for {genre_name} ({genre_read_count} books read)"
    if avg_rating >= thresholds.highly_rated_min:
        return f"Highly rated ({avg_rating:.1f}★) in {genre_name}"
    if shelved_count >= thresholds.popular_reason_shelf_min:
        return f"Popular in {genre_name} ({shelved_count} readers)"
    return f"Recommended based on your {genre_name} preference"


def fallback_reason(
    genre_name: str,
    avg_rating: float,
    thresholds: RecommendationThresholds = DEFAULT_THRESHOLDS,
) -> str:
    if avg_rating >= thresholds.popular_pick_min_rating:
        return f"Popular pick with {avg_rating:.1f}★ rating"
    return f"Discover {genre_name}"
