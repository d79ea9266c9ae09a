import time
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.rate_limiter import SlidingWindowLimiter
from app.models.response import ErrorResponse

REQUEST_ID_HEADER = "X-Request-ID"


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it on the response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"client={client_address(request)} duration={duration_ms:.1f}ms "
            f"user_agent={request.headers.get('user-agent', '-')!r} "
            f"request_id={getattr(request.state, 'request_id', '-')}"
        )
        return response


class InboundRateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed their per-minute request allowance with 429."""

    def __init__(self, app, limiter: SlidingWindowLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        client = client_address(request)
        if not self.limiter.allow(client):
            retry_after = self.limiter.retry_after(client)
            logger.warning(f"Rate limit exceeded for client {client} on {request.url.path}")
            body = ErrorResponse(
                error="Too Many Requests",
                message="Rate limit exceeded",
                code=429,
                path=request.url.path,
            )
            return JSONResponse(
                status_code=429,
                content=body.model_dump(mode="json"),
                headers={"Retry-After": str(max(1, round(retry_after)))},
            )
        return await call_next(request)
