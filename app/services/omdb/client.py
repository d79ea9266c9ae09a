import httpx

from app.core.base_client import BaseClient
from app.core.config import Settings
from app.core.version import __version__


class OMDBClient(BaseClient):
    """
    Client for the OMDB API. Every call hits the service root with query
    parameters, so callers pass an empty path.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "http://www.omdbapi.com",
        timeout: float = 30.0,
        requests_per_second: float = 1000,
        max_retries: int = 3,
        backoff: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            requests_per_second=requests_per_second,
            max_retries=max_retries,
            backoff=backoff,
            headers={"User-Agent": f"ReelScout/{__version__}", "Accept": "application/json"},
            transport=transport,
        )
        self.api_key = api_key

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "OMDBClient":
        return cls(
            api_key=settings.OMDB_API_KEY,
            base_url=settings.OMDB_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            requests_per_second=settings.OMDB_RATE_LIMIT,
            max_retries=settings.HTTP_MAX_RETRIES,
            backoff=settings.HTTP_BACKOFF_SECONDS,
            transport=transport,
        )

    async def request(self, method: str, url: str, deadline: float | None = None, **kwargs) -> httpx.Response:
        params = dict(kwargs.get("params") or {})
        params["apikey"] = self.api_key
        kwargs["params"] = params
        return await super().request(method, url, deadline=deadline, **kwargs)
