from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


_DEFAULT_DATA_DIR = Path.home() / ".bookworm" / "data"


class ScoringWeights(BaseModel):
    """Weights for the personalized score of a candidate book."""

    model_config = ConfigDict(frozen=True)

    rating_weight: float = 0.4
    review_weight: float = 0.3
    review_cap: int = 20
    shelf_weight: float = 0.3
    shelf_cap: int = 50


class PopularityWeights(BaseModel):
    """Weights for the popularity score used to pad results."""

    model_config = ConfigDict(frozen=True)

    rating_weight: float = 0.6
    shelf_weight: float = 0.4
    shelf_cap: int = 30


class RecommendationThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_read_books: int = 3
    top_genre_count: int = 3
    default_user_rating: float = 4.0
    rating_slack: float = 0.5
    popular_shelf_min: int = 5
    genre_love_min: int = 3
    highly_rated_min: float = 4.5
    popular_reason_shelf_min: int = 20
    popular_pick_min_rating: float = 4.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BOOKWORM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    db_path: str = str(_DEFAULT_DATA_DIR / "bookworm.db")
    default_recommendation_limit: int = 18
    max_recommendation_limit: int = 100
    scoring: ScoringWeights = ScoringWeights()
    popularity: PopularityWeights = PopularityWeights()
    thresholds: RecommendationThresholds = RecommendationThresholds()


@lru_cache
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
