from loguru import logger

from app.core.cache import ExpiringCache, build_cache_key
from app.core.config import Settings
from app.core.security import redact_secret
from app.models.media import Movie
from app.models.watchlist import ScoredRecommendation
from app.services.recommendation.preferences import derive_preferences
from app.services.recommendation.scoring import ScoringWeights, rank_candidates
from app.services.recommendation.similarity import rank_similar
from app.services.tmdb.service import TMDBService
from app.services.watchlist_store import WatchlistStore


class RecommendationEngine:
    """
    Watchlist-driven recommendations and genre-based similar titles.

    Both results are memoised for a fixed TTL, so a watchlist change is only
    reflected once the cached list expires. Candidate pool failures propagate
    to the caller.
    """

    def __init__(
        self,
        tmdb_service: TMDBService,
        watchlist_store: WatchlistStore,
        cache: ExpiringCache,
        settings: Settings,
    ):
        self.tmdb_service = tmdb_service
        self.watchlist_store = watchlist_store
        self.cache = cache
        self.settings = settings
        self.weights = ScoringWeights.from_settings(settings)

    def _limit(self, limit: int) -> int:
        return limit if limit > 0 else self.settings.DEFAULT_RESULT_LIMIT

    def _cached_list(self, key: str, item_type: type) -> list | None:
        value, found = self.cache.get(key)
        if not found:
            return None
        if isinstance(value, list) and all(isinstance(item, item_type) for item in value):
            return [item.model_copy(deep=True) for item in value]
        logger.warning(f"Ignoring cache entry {key} of unexpected type {type(value).__name__}")
        return None

    async def get_recommendations(self, user_id: str, limit: int = 10) -> list[ScoredRecommendation]:
        limit = self._limit(limit)
        cache_key = build_cache_key("recommendations", user_id, limit)
        cached = self._cached_list(cache_key, ScoredRecommendation)
        if cached is not None:
            return cached

        items = self.watchlist_store.get_items(user_id)
        if not items:
            return []

        preferences = derive_preferences(items)
        candidates, _ = await self.tmdb_service.fetch_trending_candidates(1)
        recommendations = rank_candidates(candidates, preferences, limit, self.weights)

        logger.info(
            f"Scored {len(candidates)} candidates for user {redact_secret(user_id)}, "
            f"returning {len(recommendations)}"
        )
        self.cache.set(cache_key, recommendations, self.settings.RECOMMENDATION_CACHE_TTL)
        return [rec.model_copy(deep=True) for rec in recommendations]

    async def get_similar_items(self, item_id: int, limit: int = 10) -> list[Movie]:
        limit = self._limit(limit)
        cache_key = build_cache_key("similar_movies", item_id, limit)
        cached = self._cached_list(cache_key, Movie)
        if cached is not None:
            return cached

        source = await self.tmdb_service.get_movie_details(item_id)
        candidates, _ = await self.tmdb_service.fetch_trending_candidates(1)
        similar = rank_similar(source, candidates, limit, self.settings.SIMILARITY_THRESHOLD)

        self.cache.set(cache_key, similar, self.settings.SIMILAR_CACHE_TTL)
        return [movie.model_copy(deep=True) for movie in similar]
