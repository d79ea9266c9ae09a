import asyncio
from typing import Any

import httpx
from loguru import logger

from app.core.exceptions import (
    NotFoundError,
    ProviderRateLimitedError,
    ProviderResponseError,
    ProviderServerError,
    ProviderUnavailableError,
    RequestCancelledError,
)
from app.core.rate_limiter import RateLimiter

RETRYABLE_SERVER_STATUSES = frozenset({500, 502, 503, 504})


class BaseClient:
    """
    Base asynchronous HTTP client with rate limiting, retry logic and logging.

    Every attempt, retries included, waits for a rate-limit permit first.
    Transport errors and 500/502/503/504 are retried on a doubling backoff,
    429 is retried on twice that backoff, and any other status is handed back
    to the caller untouched.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        requests_per_second: float = 100,
        max_retries: int = 3,
        backoff: float = 1.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.headers = headers or {}
        self.rate_limiter = RateLimiter(requests_per_second)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx.AsyncClient instance."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=10, keepalive_expiry=90.0),
            )
        return self._client

    async def close(self):
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def _send_with_retry(self, method: str, url: str, **kwargs) -> httpx.Response:
        client = await self.get_client()
        tries = self.max_retries + 1
        backoff = self.backoff

        for attempt in range(1, tries + 1):
            await self.rate_limiter.acquire()

            try:
                response = await client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                if attempt == tries:
                    logger.error(f"Request failed after {tries} attempts ({method} {url}): {e}")
                    raise ProviderUnavailableError(
                        f"request failed after {tries} attempts: {e}", attempts=tries
                    ) from e
                logger.warning(
                    f"Request failed ({method} {url}): {e}. Retrying in {backoff}s... (Attempt {attempt}/{tries})"
                )
                await self._sleep(backoff)
                backoff *= 2
                continue

            if response.is_success:
                return response

            status = response.status_code
            if status == 429:
                if attempt == tries:
                    logger.error(f"Rate limited after {tries} attempts ({method} {url})")
                    raise ProviderRateLimitedError(
                        f"rate limited after {tries} attempts", attempts=tries, status_code=status, response=response
                    )
                wait_time = backoff * 2
            elif status in RETRYABLE_SERVER_STATUSES:
                if attempt == tries:
                    logger.error(f"Server error {status} after {tries} attempts ({method} {url})")
                    raise ProviderServerError(
                        f"server error after {tries} attempts", attempts=tries, status_code=status, response=response
                    )
                wait_time = backoff
            else:
                return response

            logger.warning(
                f"Provider answered {status} ({method} {url}). "
                f"Retrying in {wait_time}s... (Attempt {attempt}/{tries})"
            )
            await response.aclose()
            await self._sleep(wait_time)
            backoff *= 2

        raise ProviderUnavailableError(f"request failed after {tries} attempts", attempts=tries)

    async def request(self, method: str, url: str, deadline: float | None = None, **kwargs) -> httpx.Response:
        """
        Perform a request with rate limiting and retries.

        ``deadline`` bounds the whole operation, permit waits and backoff
        sleeps included. When it fires the call fails with
        RequestCancelledError regardless of which attempt was running.
        """
        if deadline is None:
            return await self._send_with_retry(method, url, **kwargs)
        try:
            return await asyncio.wait_for(self._send_with_retry(method, url, **kwargs), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise RequestCancelledError(f"{method} {url} exceeded its {deadline}s deadline") from e

    async def get(self, url: str, params: dict[str, Any] | None = None, **kwargs) -> Any:
        """Perform a GET request and return the decoded JSON body."""
        response = await self.request("GET", url, params=params, **kwargs)
        if response.status_code == 404:
            raise NotFoundError(f"{url} not found")
        if not response.is_success:
            raise ProviderResponseError(
                f"GET {url} returned {response.status_code}", status_code=response.status_code, response=response
            )
        try:
            return response.json()
        except ValueError as e:
            raise ProviderResponseError(
                f"GET {url} returned a malformed body", status_code=response.status_code, response=response
            ) from e
