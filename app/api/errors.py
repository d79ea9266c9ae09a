from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.exceptions import (
    ConflictError,
    InvalidRequestError,
    MediaServiceError,
    NotFoundError,
    ProviderError,
    ProviderRateLimitedError,
    RequestCancelledError,
)
from app.models.response import ErrorResponse

# Checked in order, most specific first
ERROR_STATUS: list[tuple[type[MediaServiceError], int, str]] = [
    (InvalidRequestError, 400, "Bad Request"),
    (NotFoundError, 404, "Not Found"),
    (ConflictError, 409, "Conflict"),
    (RequestCancelledError, 504, "Gateway Timeout"),
    (ProviderRateLimitedError, 503, "Service Unavailable"),
    (ProviderError, 502, "Bad Gateway"),
]


def status_for(exc: MediaServiceError) -> tuple[int, str]:
    for exc_type, status, error in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status, error
    return 500, "Internal Server Error"


def _error_response(request: Request, status: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, code=status, path=request.url.path)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


async def media_service_error_handler(request: Request, exc: MediaServiceError) -> JSONResponse:
    status, error = status_for(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({status}): {exc}")
    return _error_response(request, status, error, str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return _error_response(request, 400, "Bad Request", details or "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MediaServiceError, media_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
