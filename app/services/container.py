from dataclasses import dataclass

import httpx
from loguru import logger

from app.core.cache import ExpiringCache
from app.core.config import Settings
from app.core.rate_limiter import SlidingWindowLimiter
from app.services.omdb.client import OMDBClient
from app.services.omdb.service import OMDBService
from app.services.recommendation.engine import RecommendationEngine
from app.services.tmdb.client import TMDBClient
from app.services.tmdb.service import TMDBService
from app.services.watchlist_store import WatchlistStore


@dataclass
class Services:
    """Everything a request handler needs, built once per application."""

    settings: Settings
    cache: ExpiringCache
    tmdb: TMDBService
    omdb: OMDBService
    watchlists: WatchlistStore
    recommendations: RecommendationEngine
    inbound_limiter: SlidingWindowLimiter | None = None

    async def close(self) -> None:
        """Drop expired cache entries and close both provider clients."""
        removed = self.cache.sweep()
        logger.info(f"Final cache sweep removed {removed} entries")
        await self.tmdb.close()
        await self.omdb.close()


def build_services(
    settings: Settings,
    tmdb_transport: httpx.AsyncBaseTransport | None = None,
    omdb_transport: httpx.AsyncBaseTransport | None = None,
) -> Services:
    cache = ExpiringCache()
    tmdb = TMDBService(TMDBClient.from_settings(settings, transport=tmdb_transport), cache, settings)
    omdb = OMDBService(OMDBClient.from_settings(settings, transport=omdb_transport), cache, settings)
    watchlists = WatchlistStore(tmdb)
    inbound_limiter = None
    if settings.INBOUND_RATE_LIMIT_PER_MINUTE > 0:
        inbound_limiter = SlidingWindowLimiter(settings.INBOUND_RATE_LIMIT_PER_MINUTE, window=60.0)

    return Services(
        settings=settings,
        cache=cache,
        tmdb=tmdb,
        omdb=omdb,
        watchlists=watchlists,
        recommendations=RecommendationEngine(tmdb, watchlists, cache, settings),
        inbound_limiter=inbound_limiter,
    )
