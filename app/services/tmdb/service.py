import asyncio
from typing import Any

from loguru import logger

from app.core.cache import ExpiringCache, build_cache_key
from app.core.config import Settings
from app.core.exceptions import MediaServiceError
from app.models.media import Credits, Genre, MediaPage, Movie, TVShow
from app.models.response import Meta
from app.services.tmdb.client import TMDBClient
from app.services.tmdb.mapper import (
    credits_from_tmdb,
    genres_from_tmdb,
    movie_from_tmdb,
    results_of,
    tv_from_tmdb,
)
from app.utils import paginate_results

TRENDING_TIMEFRAMES = ("day", "week")


class TMDBService:
    """
    Service for interacting with The Movie Database (TMDB) API.

    Every public lookup goes through the shared ExpiringCache first; the key
    is built from the operation name and its arguments in a fixed order.
    """

    def __init__(self, client: TMDBClient, cache: ExpiringCache, settings: Settings):
        self.client = client
        self.cache = cache
        self.settings = settings

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()

    def _cached(self, key: str, expected: type | tuple[type, ...], item_type: type | None = None) -> Any:
        value, found = self.cache.get(key)
        if not found:
            return None
        if not isinstance(value, expected) or (
            item_type is not None and not all(isinstance(item, item_type) for item in value)
        ):
            logger.warning(f"Ignoring cache entry {key} of unexpected type {type(value).__name__}")
            return None
        return value

    async def _search_listing(self, media_type: str, query: str, include_adult: bool) -> list[Movie]:
        params: dict[str, Any] = {"query": query, "page": 1}
        if media_type == "movie":
            params["include_adult"] = str(include_adult).lower()
        data = await self.client.get(f"/search/{media_type}", params=params)
        return [movie_from_tmdb(item, media_type) for item in results_of(data)]

    async def search_media(
        self,
        query: str,
        page: int = 1,
        per_page: int = 10,
        media_type: str = "all",
        include_adult: bool = False,
    ) -> tuple[list[Movie], Meta]:
        """
        Search movies and/or TV shows.

        Only the first upstream page of each kind is fetched. The combined
        buffer (movies first) is cached and paginated locally.
        """
        if per_page <= 0:
            per_page = 10

        cache_key = build_cache_key("tmdb_search", query, media_type, include_adult)
        buffered = self._cached(cache_key, list, Movie)
        if buffered is None:
            buffered = []
            if media_type in ("movie", "all"):
                buffered += await self._search_listing("movie", query, include_adult)
            if media_type in ("tv", "all"):
                buffered += await self._search_listing("tv", query, include_adult)
            self.cache.set(cache_key, buffered, self.settings.SEARCH_CACHE_TTL)

        results, meta = paginate_results(buffered, page, per_page)
        return [movie.model_copy(deep=True) for movie in results], meta

    async def get_movie_details(self, movie_id: int) -> Movie:
        """Get a movie with credits and its YouTube trailer key."""
        cache_key = build_cache_key("tmdb_movie", movie_id)
        cached = self._cached(cache_key, Movie)
        if cached is not None:
            return cached.model_copy(deep=True)

        data = await self.client.get(f"/movie/{movie_id}", params={"append_to_response": "credits"})
        movie = movie_from_tmdb(data, "movie")

        if not movie.credits.cast:
            try:
                movie.credits = await self.get_movie_credits(movie_id)
            except MediaServiceError as e:
                logger.warning(f"Could not load credits for movie {movie_id}: {e}")

        try:
            movie.trailer_key = await self._get_trailer_key(movie_id)
        except MediaServiceError as e:
            logger.warning(f"Could not load trailer for movie {movie_id}: {e}")

        self.cache.set(cache_key, movie, self.settings.CACHE_TTL)
        return movie.model_copy(deep=True)

    async def get_movie_credits(self, movie_id: int) -> Credits:
        data = await self.client.get(f"/movie/{movie_id}/credits")
        return credits_from_tmdb(data)

    async def _get_trailer_key(self, movie_id: int) -> str | None:
        data = await self.client.get(f"/movie/{movie_id}/videos")
        for video in results_of(data):
            if video.get("site") == "YouTube" and video.get("type") == "Trailer" and video.get("key"):
                return video["key"]
        return None

    async def get_tv_details(self, tv_id: int) -> TVShow:
        cache_key = build_cache_key("tmdb_tv", tv_id)
        cached = self._cached(cache_key, TVShow)
        if cached is not None:
            return cached.model_copy(deep=True)

        data = await self.client.get(f"/tv/{tv_id}")
        show = tv_from_tmdb(data)
        self.cache.set(cache_key, show, self.settings.CACHE_TTL)
        return show.model_copy(deep=True)

    async def _trending_listing(self, media_type: str, timeframe: str, page: int) -> MediaPage:
        data = await self.client.get(f"/trending/{media_type}/{timeframe}", params={"page": page})
        return MediaPage(
            page=page,
            results=[movie_from_tmdb(item, media_type) for item in results_of(data)],
            total_pages=data.get("total_pages") or 0,
            total_results=data.get("total_results") or 0,
        )

    async def get_trending_media(self, timeframe: str = "day", page: int = 1, media_type: str = "movie") -> MediaPage:
        """
        Get one page of trending titles.

        For ``media_type="all"`` the movie and TV pages are fetched together
        and merged, movies first.
        """
        if timeframe not in TRENDING_TIMEFRAMES:
            timeframe = "day"
        if page < 1:
            page = 1

        cache_key = build_cache_key("tmdb_trending", timeframe, page, media_type)
        cached = self._cached(cache_key, MediaPage)
        if cached is not None:
            return cached.model_copy(deep=True)

        kinds = [kind for kind in ("movie", "tv") if media_type in (kind, "all")]
        if not kinds:
            kinds = ["movie"]
        pages = await asyncio.gather(*(self._trending_listing(kind, timeframe, page) for kind in kinds))

        merged = MediaPage(
            page=page,
            results=[movie for listing in pages for movie in listing.results],
            total_pages=max(listing.total_pages for listing in pages),
            total_results=sum(listing.total_results for listing in pages),
        )
        self.cache.set(cache_key, merged, self.settings.TRENDING_CACHE_TTL)
        return merged.model_copy(deep=True)

    async def fetch_trending_candidates(self, page: int = 1) -> tuple[list[Movie], int]:
        """Weekly trending movies and TV, used as the recommendation candidate pool."""
        trending = await self.get_trending_media("week", page, "all")
        return trending.results, trending.total_pages

    async def get_movies_by_genre(self, genre_id: int, page: int = 1, sort_by: str = "popularity.desc") -> MediaPage:
        if page < 1:
            page = 1
        if not sort_by:
            sort_by = "popularity.desc"

        cache_key = build_cache_key("tmdb_genre", genre_id, page, sort_by)
        cached = self._cached(cache_key, MediaPage)
        if cached is not None:
            return cached.model_copy(deep=True)

        params = {"with_genres": genre_id, "page": page, "sort_by": sort_by}
        data = await self.client.get("/discover/movie", params=params)
        result = MediaPage(
            page=page,
            results=[movie_from_tmdb(item, "movie") for item in results_of(data)],
            total_pages=data.get("total_pages") or 0,
            total_results=data.get("total_results") or 0,
        )
        self.cache.set(cache_key, result, self.settings.CACHE_TTL)
        return result.model_copy(deep=True)

    async def get_genres(self) -> list[Genre]:
        cache_key = build_cache_key("tmdb_genres")
        cached = self._cached(cache_key, list, Genre)
        if cached is not None:
            return [genre.model_copy() for genre in cached]

        data = await self.client.get("/genre/movie/list")
        genres = genres_from_tmdb(data)
        self.cache.set(cache_key, genres, self.settings.GENRE_LIST_CACHE_TTL)
        return [genre.model_copy() for genre in genres]
