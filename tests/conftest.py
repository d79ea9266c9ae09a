import json

import httpx
import pytest

from app.core.cache import ExpiringCache
from app.core.config import Settings
from app.services.omdb.client import OMDBClient
from app.services.omdb.service import OMDBService
from app.services.tmdb.client import TMDBClient
from app.services.tmdb.service import TMDBService


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def movie_payload(movie_id: int, genre_ids: list[int], **overrides) -> dict:
    payload = {
        "id": movie_id,
        "title": f"Movie {movie_id}",
        "original_title": f"Movie {movie_id}",
        "overview": "An overview",
        "poster_path": f"/poster{movie_id}.jpg",
        "backdrop_path": f"/backdrop{movie_id}.jpg",
        "release_date": "2020-05-01",
        "vote_average": 7.0,
        "vote_count": 100,
        "popularity": 20.0,
        "genre_ids": genre_ids,
    }
    payload.update(overrides)
    return payload


def tv_payload(tv_id: int, genre_ids: list[int], **overrides) -> dict:
    payload = {
        "id": tv_id,
        "name": f"Show {tv_id}",
        "original_name": f"Show {tv_id}",
        "overview": "A show",
        "first_air_date": "2019-01-01",
        "vote_average": 8.0,
        "vote_count": 50,
        "popularity": 15.0,
        "genre_ids": genre_ids,
    }
    payload.update(overrides)
    return payload


def listing(results: list[dict], total_pages: int = 1) -> dict:
    return {"page": 1, "results": results, "total_pages": total_pages, "total_results": len(results)}


class Router:
    """
    Path-keyed fake provider for httpx.MockTransport.

    Routes map a URL path to a JSON body, an httpx.Response or a callable
    returning either. Every request is recorded.
    """

    def __init__(self, routes: dict[str, object] | None = None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def calls(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"status_message": "not found"})
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            # a fresh response per call, retries would otherwise reuse a closed one
            return httpx.Response(route.status_code, headers=route.headers, content=route.content)
        return httpx.Response(200, content=json.dumps(route), headers={"Content-Type": "application/json"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        TMDB_API_KEY="tmdb-test-key",
        OMDB_API_KEY="omdb-test-key",
        TMDB_BASE_URL="https://tmdb.test/3",
        OMDB_BASE_URL="https://omdb.test",
        HTTP_BACKOFF_SECONDS=0.0,
        HTTP_MAX_RETRIES=3,
        TMDB_RATE_LIMIT=1000,
        OMDB_RATE_LIMIT=1000,
        CACHE_SWEEP_INTERVAL_SECONDS=0,
        INBOUND_RATE_LIMIT_PER_MINUTE=0,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ExpiringCache:
    return ExpiringCache(clock=clock)


@pytest.fixture
def tmdb_router() -> Router:
    return Router()


@pytest.fixture
def omdb_router() -> Router:
    return Router()


@pytest.fixture
def tmdb_service(settings, cache, tmdb_router) -> TMDBService:
    client = TMDBClient.from_settings(settings, transport=tmdb_router.transport())
    return TMDBService(client, cache, settings)


@pytest.fixture
def omdb_service(settings, cache, omdb_router) -> OMDBService:
    client = OMDBClient.from_settings(settings, transport=omdb_router.transport())
    return OMDBService(client, cache, settings)
