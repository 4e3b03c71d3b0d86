"""
API rate limiting using slowapi.

Provides a shared Limiter instance keyed by client IP address.
Enable via RATE_LIMIT_ENABLED=true; when disabled the decorators
are pass-through.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from rignum.config.settings import get_settings


def _get_rate_limit_key(request: Request) -> str:
    """Extract rate limit key: forwarded client address or remote IP."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Create a configured Limiter instance."""
    settings = get_settings()
    return Limiter(
        key_func=_get_rate_limit_key,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        enabled=settings.rate_limit_enabled,
    )


limiter = create_limiter()
