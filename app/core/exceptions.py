"""
Error taxonomy shared by the provider clients, services and the API layer.

Callers should be able to tell "retry later" (ProviderError subclasses other
than ProviderResponseError) apart from "this will never succeed" (NotFoundError,
ProviderResponseError, ConflictError).
"""

import httpx


class MediaServiceError(Exception):
    """Base class for every error raised by this service."""


class ProviderError(MediaServiceError):
    """An outbound call to an external provider failed."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int = 1,
        status_code: int | None = None,
        response: httpx.Response | None = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.status_code = status_code
        self.response = response


class ProviderUnavailableError(ProviderError):
    """Transport-level failures (refused, reset, timed out) exhausted all retries."""


class ProviderRateLimitedError(ProviderError):
    """The provider kept answering 429 until retries ran out."""


class ProviderServerError(ProviderError):
    """The provider kept answering 5xx until retries ran out."""


class ProviderResponseError(ProviderError):
    """Permanent failure: non-retryable status, provider error payload or malformed body."""


class RequestCancelledError(MediaServiceError):
    """The caller's deadline expired before the operation completed."""


class NotFoundError(MediaServiceError):
    """The requested item, watchlist or watchlist entry does not exist."""


class ConflictError(MediaServiceError):
    """The write would duplicate an existing resource."""


class InvalidRequestError(MediaServiceError):
    """The request is missing required input or carries an unusable value."""
