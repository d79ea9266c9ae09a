from fastapi import Header, Request

from app.core.exceptions import InvalidRequestError
from app.services.container import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """User identity comes from the ``X-User-ID`` header."""
    if not x_user_id or not x_user_id.strip():
        raise InvalidRequestError("X-User-ID header is required")
    return x_user_id.strip()
