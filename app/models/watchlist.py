from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from app.models.media import Movie

WatchStatus = Literal["to_watch", "watching", "completed", "dropped"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistItem(BaseModel):
    id: int
    watchlist_id: int
    movie_id: int
    movie: Movie | None = None
    status: WatchStatus = "to_watch"
    rating: float = Field(default=0.0, ge=0, le=10)
    notes: str = ""
    added_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Watchlist(BaseModel):
    id: int
    user_id: str
    name: str
    description: str = ""
    is_public: bool = False
    items: list[WatchlistItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class WatchlistCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    is_public: bool = False


class WatchlistItemAddRequest(BaseModel):
    movie_id: int
    status: WatchStatus = "to_watch"
    rating: float = Field(default=0.0, ge=0, le=10)
    notes: str = ""


class WatchlistItemUpdateRequest(BaseModel):
    status: WatchStatus = "to_watch"
    rating: float = Field(default=0.0, ge=0, le=10)
    notes: str = ""


class WatchlistStats(BaseModel):
    total_items: int = 0
    completed_items: int = 0
    watching_items: int = 0
    to_watch_items: int = 0
    dropped_items: int = 0
    average_rating: float = 0.0
    total_hours: int = 0


class ScoredRecommendation(BaseModel):
    """A candidate with its blended score and the signal breakdown behind it."""

    movie: Movie
    score: float
    reason: str
    genre_match: float = 0.0
    rating_match: float = 0.0
    year_match: float = 0.0
