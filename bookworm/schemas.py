from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenreRef(CamelModel):
    id: str = Field(alias="_id")
    name: str


class RecommendationItem(CamelModel):
    id: str = Field(alias="_id")
    title: str
    author: str
    cover_image: str = ""
    genre: GenreRef
    avg_rating: float
    shelved_count: int
    review_count: Optional[int] = None
    score: Optional[float] = None
    reason: str


class RecommendationData(CamelModel):
    recommendations: List[RecommendationItem] = Field(default_factory=list)
    is_personalized: bool
    books_read: int


class RecommendationResponse(CamelModel):
    success: bool = True
    data: RecommendationData


class DashboardOverview(CamelModel):
    total_books: int
    total_users: int
    total_reviews: int
    pending_reviews: int
    recent_users: int


class GenreCount(CamelModel):
    genre: str
    count: int


class MonthCount(CamelModel):
    month: str
    count: int


class ShelfCount(CamelModel):
    shelf: str
    count: int


class RoleCount(CamelModel):
    role: str
    count: int


class TopRatedBook(CamelModel):
    title: str
    avg_rating: float
    total_reviews: int


class DashboardCharts(CamelModel):
    books_per_genre: List[GenreCount] = Field(default_factory=list)
    monthly_books: List[MonthCount] = Field(default_factory=list)
    shelf_distribution: List[ShelfCount] = Field(default_factory=list)
    user_roles: List[RoleCount] = Field(default_factory=list)
    top_rated_books: List[TopRatedBook] = Field(default_factory=list)


class DashboardData(CamelModel):
    overview: DashboardOverview
    charts: DashboardCharts


class DashboardResponse(CamelModel):
    success: bool = True
    data: DashboardData


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    error: Optional[str] = None
