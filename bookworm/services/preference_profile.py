from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from bookworm.services.catalog_queries import ReadBook


@dataclass
class PreferenceProfile:
    top_genres: List[str] = field(default_factory=list)
    genre_counts: Dict[str, int] = field(default_factory=dict)
    user_baseline: float = 4.0


def build_preference_profile(
    read_history: Sequence[ReadBook],
    ratings: Sequence[int],
    top_genre_count: int = 3,
    default_rating: float = 4.0,
) -> PreferenceProfile:
    genre_counts: Dict[str, int] = {}
    for entry in read_history:
        genre_counts[entry.genre_id] = genre_counts.get(entry.genre_id, 0) + 1

    # sorted() is stable, so the first genre seen wins a tie.
    ranked = sorted(genre_counts.items(), key=lambda pair: pair[1], reverse=True)
    top_genres = [genre_id for genre_id, _ in ranked[: max(top_genre_count, 0)]]

    if ratings:
        user_baseline = sum(ratings) / len(ratings)
    else:
        user_baseline = default_rating

    return PreferenceProfile(
        top_genres=top_genres,
        genre_counts=genre_counts,
        user_baseline=float(user_baseline),
    )
