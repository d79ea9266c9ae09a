import httpx

from app.core.base_client import BaseClient
from app.core.config import Settings
from app.core.version import __version__


class TMDBClient(BaseClient):
    """
    Client for interacting with the TMDB API.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        timeout: float = 30.0,
        requests_per_second: float = 40,
        max_retries: int = 3,
        backoff: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "User-Agent": f"ReelScout/{__version__}",
            "Accept": "application/json",
        }
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            requests_per_second=requests_per_second,
            max_retries=max_retries,
            backoff=backoff,
            headers=headers,
            transport=transport,
        )
        self.api_key = api_key
        self.language = language

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "TMDBClient":
        return cls(
            api_key=settings.TMDB_API_KEY,
            base_url=settings.TMDB_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            requests_per_second=settings.TMDB_RATE_LIMIT,
            max_retries=settings.HTTP_MAX_RETRIES,
            backoff=settings.HTTP_BACKOFF_SECONDS,
            transport=transport,
        )

    async def request(self, method: str, url: str, deadline: float | None = None, **kwargs) -> httpx.Response:
        """Override request to always include API key and language."""
        params = dict(kwargs.get("params") or {})
        params["api_key"] = self.api_key
        params["language"] = self.language
        kwargs["params"] = params
        return await super().request(method, url, deadline=deadline, **kwargs)
