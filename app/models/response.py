from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Meta(BaseModel):
    """Pagination metadata attached to list responses."""

    page: int = 1
    per_page: int = 0
    total_pages: int = 0
    total_results: int = 0
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def for_page(cls, page: int, per_page: int, total_pages: int, total_results: int) -> "Meta":
        return cls(
            page=page,
            per_page=per_page,
            total_pages=total_pages,
            total_results=total_results,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class SuccessResponse(BaseModel):
    success: bool = True
    message: str
    data: Any = None
    timestamp: datetime = Field(default_factory=_utcnow)
    meta: Meta | None = None


class PaginatedResponse(BaseModel):
    success: bool = True
    message: str
    data: Any = None
    meta: Meta
    timestamp: datetime = Field(default_factory=_utcnow)


class SearchResponse(BaseModel):
    success: bool = True
    message: str = "Search completed successfully"
    results: Any = None
    query: str
    meta: Meta
    timestamp: datetime = Field(default_factory=_utcnow)


class TrendingResponse(BaseModel):
    success: bool = True
    message: str = "Trending content retrieved successfully"
    trending: Any = None
    timeframe: str
    meta: Meta
    timestamp: datetime = Field(default_factory=_utcnow)


class RecommendationResponse(BaseModel):
    success: bool = True
    message: str = "Recommendations generated successfully"
    recommendations: Any = None
    user_id: str
    meta: Meta
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    code: int
    timestamp: datetime = Field(default_factory=_utcnow)
    path: str | None = None
