from fastapi import APIRouter, Depends, Query
from loguru import logger

from app.api.deps import get_services
from app.core.constants import PROVIDER_PAGE_SIZE
from app.core.exceptions import InvalidRequestError, MediaServiceError
from app.models.response import Meta, PaginatedResponse, SearchResponse, SuccessResponse
from app.services.container import Services

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("/search", response_model=SearchResponse)
async def search_movies(
    q: str = Query(default=""),
    page: int = 1,
    per_page: int = 10,
    type: str = "all",
    include_adult: bool = False,
    services: Services = Depends(get_services),
):
    """Search movies and TV shows by title."""
    if not q.strip():
        raise InvalidRequestError("Query parameter 'q' is required")
    if type not in ("movie", "tv", "all"):
        raise InvalidRequestError("type must be one of movie, tv, all")

    results, meta = await services.tmdb.search_media(q, max(page, 1), per_page, type, include_adult)
    return SearchResponse(results=results, query=q, meta=meta)


@router.get("/genres", response_model=SuccessResponse)
async def get_genres(services: Services = Depends(get_services)):
    genres = await services.tmdb.get_genres()
    return SuccessResponse(data=genres, message="Genres retrieved successfully")


@router.get("/genres/{genre_id}", response_model=PaginatedResponse)
async def get_movies_by_genre(
    genre_id: int,
    page: int = 1,
    sort_by: str = "popularity.desc",
    services: Services = Depends(get_services),
):
    page = max(page, 1)
    result = await services.tmdb.get_movies_by_genre(genre_id, page, sort_by)
    meta = Meta.for_page(result.page, PROVIDER_PAGE_SIZE, result.total_pages, result.total_results)
    return PaginatedResponse(data=result.results, meta=meta, message="Movies retrieved successfully")


@router.get("/{movie_id}", response_model=SuccessResponse)
async def get_movie_details(movie_id: int, services: Services = Depends(get_services)):
    """Movie details from TMDB, with OMDB ratings merged in when OMDB knows the title."""
    movie = await services.tmdb.get_movie_details(movie_id)
    try:
        movie = await services.omdb.enrich_movie(movie)
    except MediaServiceError as e:
        logger.warning(f"OMDB enrichment skipped for movie {movie_id}: {e}")
    return SuccessResponse(data=movie, message="Movie details retrieved successfully")


@router.get("/{movie_id}/similar", response_model=SuccessResponse)
async def get_similar_movies(movie_id: int, limit: int = 10, services: Services = Depends(get_services)):
    similar = await services.recommendations.get_similar_items(movie_id, limit)
    return SuccessResponse(data=similar, message="Similar movies retrieved successfully")
