import functools
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at start-up and handed to each component that needs it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        frozen=True,
    )

    PORT: int = 8080
    HOST: str = "0.0.0.0"
    APP_ENV: Literal["development", "production"] = "production"
    LOG_LEVEL: str = "INFO"

    # Catalog provider
    TMDB_API_KEY: str = ""
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_RATE_LIMIT: int = 40  # requests per second

    # Ratings provider
    OMDB_API_KEY: str = ""
    OMDB_BASE_URL: str = "http://www.omdbapi.com"
    OMDB_RATE_LIMIT: int = 1000

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0
    HTTP_MAX_RETRIES: int = 3
    HTTP_BACKOFF_SECONDS: float = 1.0

    # Cache TTLs in seconds
    CACHE_TTL: int = 3600  # item details
    SEARCH_CACHE_TTL: int = 1800
    TRENDING_CACHE_TTL: int = 3600
    GENRE_LIST_CACHE_TTL: int = 86400
    RECOMMENDATION_CACHE_TTL: int = 1800
    SIMILAR_CACHE_TTL: int = 1800
    # 0 disables the background sweep
    CACHE_SWEEP_INTERVAL_SECONDS: int = 300

    # Recommendation heuristics
    RECOMMENDATION_CATEGORY_WEIGHT: float = 0.5
    RECOMMENDATION_RATING_WEIGHT: float = 0.3
    RECOMMENDATION_YEAR_WEIGHT: float = 0.2
    RECOMMENDATION_POPULARITY_CAP: float = 0.1
    SIMILARITY_THRESHOLD: float = 0.1
    DEFAULT_RESULT_LIMIT: int = 10

    # Inbound requests per client per minute, 0 disables
    INBOUND_RATE_LIMIT_PER_MINUTE: int = 100


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
