from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.core.cache import ExpiringCache, build_cache_key
from app.core.config import Settings
from app.core.exceptions import MediaServiceError, NotFoundError, ProviderResponseError
from app.models.media import Movie, Ratings
from app.models.omdb import OMDBRecord
from app.services.omdb.client import OMDBClient
from app.utils import calculate_average_rating, parse_year, validate_movie_data, validate_ratings

MISSING = ("", "N/A")


def _parse_float(value: str) -> float:
    if value in MISSING:
        return 0.0
    try:
        return float(value.rstrip("%").replace(",", ""))
    except ValueError:
        return 0.0


def _check_response(data: Any, what: str) -> dict[str, Any]:
    """OMDB answers 200 with ``Response: "False"`` for lookups it cannot serve."""
    if not isinstance(data, dict):
        raise ProviderResponseError(f"OMDB returned a malformed body for {what}")
    if data.get("Response") == "False":
        error = data.get("Error") or "unknown error"
        if "not found" in error.lower():
            raise NotFoundError(f"OMDB: {error} ({what})")
        raise ProviderResponseError(f"OMDB API error: {error}")
    return data


def _record(data: dict[str, Any], what: str) -> OMDBRecord:
    try:
        return OMDBRecord.model_validate(data)
    except ValidationError as e:
        raise ProviderResponseError(f"OMDB returned an unexpected record for {what}") from e


class OMDBService:
    """Ratings lookups against OMDB, cached in the shared ExpiringCache."""

    def __init__(self, client: OMDBClient, cache: ExpiringCache, settings: Settings):
        self.client = client
        self.cache = cache
        self.settings = settings

    async def close(self):
        await self.client.close()

    def _cached(self, key: str, expected: type, item_type: type | None = None) -> Any:
        value, found = self.cache.get(key)
        if found and isinstance(value, expected):
            if item_type is None or all(isinstance(item, item_type) for item in value):
                return value
        if found:
            logger.warning(f"Ignoring cache entry {key} of unexpected type {type(value).__name__}")
        return None

    async def get_movie_by_title(self, title: str, year: str = "") -> OMDBRecord:
        cache_key = build_cache_key("omdb_title", title, year)
        cached = self._cached(cache_key, OMDBRecord)
        if cached is not None:
            return cached

        params = {"t": title, "plot": "full"}
        if year:
            params["y"] = year
        what = f"title {title!r}"
        data = _check_response(await self.client.get("/", params=params), what)
        record = _record(data, what)
        self.cache.set(cache_key, record, self.settings.CACHE_TTL)
        return record

    async def get_movie_by_imdb_id(self, imdb_id: str) -> OMDBRecord:
        cache_key = build_cache_key("omdb_imdb", imdb_id)
        cached = self._cached(cache_key, OMDBRecord)
        if cached is not None:
            return cached

        what = f"IMDb id {imdb_id}"
        data = _check_response(await self.client.get("/", params={"i": imdb_id, "plot": "full"}), what)
        record = _record(data, what)
        self.cache.set(cache_key, record, self.settings.CACHE_TTL)
        return record

    async def search_movies(self, query: str, page: int = 1) -> list[OMDBRecord]:
        cache_key = build_cache_key("omdb_search", query, page)
        cached = self._cached(cache_key, list, OMDBRecord)
        if cached is not None:
            return [record.model_copy(deep=True) for record in cached]

        params = {"s": query, "type": "movie", "page": page}
        what = f"search {query!r}"
        data = _check_response(await self.client.get("/", params=params), what)
        records = [_record(item, what) for item in data.get("Search") or [] if isinstance(item, dict)]
        self.cache.set(cache_key, records, self.settings.SEARCH_CACHE_TTL)
        return records

    @staticmethod
    def extract_ratings(record: OMDBRecord) -> Ratings:
        """
        Pull IMDb, Metacritic and Rotten Tomatoes scores out of a record.

        The OMDB aggregate is the mean of whichever of the three are present,
        with the two percentage scores brought down to a 10-point scale.
        """
        ratings = Ratings(
            imdb=_parse_float(record.imdb_rating),
            metacritic=_parse_float(record.metascore),
        )
        for rating in record.ratings:
            if rating.source.lower() == "rotten tomatoes":
                ratings.rotten_tomatoes = _parse_float(rating.value)

        scores = []
        if ratings.imdb > 0:
            scores.append(ratings.imdb)
        if ratings.metacritic > 0:
            scores.append(ratings.metacritic / 10.0)
        if ratings.rotten_tomatoes > 0:
            scores.append(ratings.rotten_tomatoes / 10.0)
        if scores:
            ratings.omdb = sum(scores) / len(scores)

        return validate_ratings(ratings)

    async def enrich_movie(self, movie: Movie) -> Movie:
        """
        Merge OMDB ratings into ``movie`` in place and fill a missing overview or runtime.

        Raises the lookup error when neither the title nor the original title
        can be found.
        """
        year = parse_year(movie.release_date)
        year_str = str(year) if year > 0 else ""

        try:
            record = await self.get_movie_by_title(movie.title, year_str)
        except MediaServiceError:
            if not movie.original_title or movie.original_title == movie.title:
                raise
            record = await self.get_movie_by_title(movie.original_title, year_str)

        found = self.extract_ratings(record)
        if found.imdb > 0:
            movie.ratings.imdb = found.imdb
        if found.rotten_tomatoes > 0:
            movie.ratings.rotten_tomatoes = found.rotten_tomatoes
        if found.metacritic > 0:
            movie.ratings.metacritic = found.metacritic
        if found.omdb > 0:
            movie.ratings.omdb = found.omdb
        movie.ratings.average = calculate_average_rating(movie.ratings)

        if movie.overview in ("", "No overview available") and record.plot not in MISSING:
            movie.overview = record.plot

        if movie.runtime == 0 and record.runtime not in MISSING:
            try:
                movie.runtime = int(record.runtime.removesuffix(" min"))
            except ValueError:
                logger.debug(f"Unparseable OMDB runtime {record.runtime!r} for {movie.title}")

        return validate_movie_data(movie)
