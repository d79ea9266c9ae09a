from collections import Counter

from fastapi import APIRouter, Depends

from app.api.deps import get_services
from app.core.constants import POPULAR_GENRE_MIN_COUNT, PROVIDER_PAGE_SIZE
from app.core.exceptions import InvalidRequestError
from app.models.media import Genre
from app.models.response import Meta, PaginatedResponse, SuccessResponse, TrendingResponse
from app.services.container import Services
from app.services.tmdb.service import TRENDING_TIMEFRAMES

router = APIRouter(prefix="/trending", tags=["trending"])

TOP_MOVIES_IN_STATS = 5


@router.get("", response_model=TrendingResponse)
async def get_trending(
    timeframe: str = "day",
    page: int = 1,
    type: str = "movie",
    services: Services = Depends(get_services),
):
    if timeframe not in TRENDING_TIMEFRAMES:
        raise InvalidRequestError("Invalid timeframe. Use 'day' or 'week'")
    if type not in ("movie", "tv", "all"):
        raise InvalidRequestError("type must be one of movie, tv, all")

    result = await services.tmdb.get_trending_media(timeframe, max(page, 1), type)
    meta = Meta.for_page(result.page, PROVIDER_PAGE_SIZE, result.total_pages, result.total_results)
    return TrendingResponse(trending=result.results, timeframe=timeframe, meta=meta)


@router.get("/by-genre", response_model=PaginatedResponse)
async def get_trending_by_genre(
    genre_id: int,
    page: int = 1,
    sort_by: str = "popularity.desc",
    services: Services = Depends(get_services),
):
    result = await services.tmdb.get_movies_by_genre(genre_id, max(page, 1), sort_by)
    meta = Meta.for_page(result.page, PROVIDER_PAGE_SIZE, result.total_pages, result.total_results)
    return PaginatedResponse(
        data=result.results, meta=meta, message="Trending content by genre retrieved successfully"
    )


@router.get("/stats", response_model=SuccessResponse)
async def get_trending_stats(services: Services = Depends(get_services)):
    daily = await services.tmdb.get_trending_media("day", 1, "movie")
    weekly = await services.tmdb.get_trending_media("week", 1, "movie")
    stats = {
        "daily_trending_count": len(daily.results),
        "weekly_trending_count": len(weekly.results),
        "daily_top_movies": daily.results[:TOP_MOVIES_IN_STATS],
        "weekly_top_movies": weekly.results[:TOP_MOVIES_IN_STATS],
    }
    return SuccessResponse(data=stats, message="Trending stats retrieved successfully")


def count_trending_genres(genres: list[Genre], trending_genre_ids: list[list[int]]) -> list[dict]:
    """How many trending titles carry each genre; popular from POPULAR_GENRE_MIN_COUNT up."""
    counts = Counter(genre_id for ids in trending_genre_ids for genre_id in ids)
    return [
        {"genre": genre, "count": counts[genre.id], "popular": counts[genre.id] >= POPULAR_GENRE_MIN_COUNT}
        for genre in genres
    ]


@router.get("/genres", response_model=SuccessResponse)
async def get_trending_genres(services: Services = Depends(get_services)):
    genres = await services.tmdb.get_genres()
    weekly = await services.tmdb.get_trending_media("week", 1, "movie")
    data = count_trending_genres(genres, [movie.genre_ids for movie in weekly.results])
    return SuccessResponse(data=data, message="Trending genres retrieved successfully")
