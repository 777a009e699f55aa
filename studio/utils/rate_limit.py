"""
Rate limiting for public and login endpoints.
Uses slowapi to slow down password guessing and contact form spam.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from studio.config import settings


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting.

    X-Forwarded-For is only honoured when the direct peer is one of
    TRUSTED_PROXIES; from any other peer it is ignored.
    """
    remote = get_remote_address(request)

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and remote in settings.TRUSTED_PROXIES:
        # First IP in the chain is the original client
        return forwarded.split(",")[0].strip()

    return remote


limiter = Limiter(
    key_func=get_client_identifier,
    enabled=settings.RATE_LIMIT_ENABLED,
    storage_uri="memory://"  # In-memory storage; use Redis when running several workers
)


RATE_LIMITS = {
    "login": "5/minute",
    "contact": "5/hour",
    "upload": "60/hour",
}
