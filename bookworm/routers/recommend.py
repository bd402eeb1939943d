from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from bookworm.config import get_settings
from bookworm.db import get_session
from bookworm.schemas import DashboardResponse, ErrorResponse, RecommendationResponse
from bookworm.services.dashboard_stats import collect_dashboard_stats
from bookworm.services.recommendation_engine import RecommendationEngine

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_recommendation_engine() -> RecommendationEngine:
    settings = get_settings()
    return RecommendationEngine(
        scoring=settings.scoring,
        popularity=settings.popularity,
        thresholds=settings.thresholds,
    )


def _resolve_limit(raw_limit: Optional[str]) -> int:
    """Unparseable or non-positive limits fall back to the configured default."""
    settings = get_settings()
    try:
        limit = int((raw_limit or "").strip())
    except ValueError:
        return settings.default_recommendation_limit
    if limit < 1:
        return settings.default_recommendation_limit
    return min(limit, settings.max_recommendation_limit)


@router.get(
    "/{user_id}",
    response_model=RecommendationResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
def get_recommendations(
    user_id: str,
    limit: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> RecommendationResponse:
    data = engine.recommend(session, user_id, _resolve_limit(limit))
    return RecommendationResponse(data=data)


@router.get("", response_model=DashboardResponse, responses={500: {"model": ErrorResponse}})
def get_dashboard_stats(session: Session = Depends(get_session)) -> DashboardResponse:
    return DashboardResponse(data=collect_dashboard_stats(session))
