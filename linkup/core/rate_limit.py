from slowapi import Limiter
from slowapi.util import get_remote_address

from linkup.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)


def auth_rate_limit() -> str:
    """Limit for login and signup routes, read per request"""
    return settings.auth_rate_limit
