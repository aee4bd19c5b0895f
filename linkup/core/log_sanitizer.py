import re
from typing import Any, Mapping

SENSITIVE_FIELDS = (
    "password",
    "token",
    "secret",
    "authorization",
    "cookie",
    "csrf",
    "api_key",
)
MASK = "[REDACTED]"

_JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")


def _is_sensitive(key: str) -> bool:
    lower_key = key.lower()
    return any(field in lower_key for field in SENSITIVE_FIELDS)


def sanitize_string(value: str) -> str:
    return _JWT_PATTERN.sub(MASK, value)


def sanitize_for_logging(data: Any, depth: int = 5) -> Any:
    """Return a copy of data with credentials masked, safe to pass to a logger."""
    if depth <= 0:
        return "[MAX_DEPTH]"
    if isinstance(data, Mapping):
        return {
            key: MASK if _is_sensitive(str(key)) else sanitize_for_logging(value, depth - 1)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize_for_logging(item, depth - 1) for item in data]
    if isinstance(data, str):
        return sanitize_string(data)
    return data
