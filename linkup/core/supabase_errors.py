"""PostgREST error classification shared by the services."""

import logging
from fastapi import HTTPException

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"


def _error_code(error: Exception) -> str:
    code = getattr(error, "code", None)
    return str(code) if code else ""


def is_unique_violation(error: Exception) -> bool:
    return _error_code(error) == UNIQUE_VIOLATION or "duplicate key" in str(error).lower()


def is_foreign_key_violation(error: Exception) -> bool:
    return _error_code(error) == FOREIGN_KEY_VIOLATION


def to_http_exception(error: Exception, context: str) -> HTTPException:
    """Map a Supabase/PostgREST failure onto the API error categories."""
    if isinstance(error, HTTPException):
        return error
    if is_unique_violation(error):
        return HTTPException(status_code=409, detail="Resource already exists")
    if is_foreign_key_violation(error):
        return HTTPException(status_code=400, detail="Referenced resource does not exist")
    if _error_code(error) == NOT_NULL_VIOLATION:
        return HTTPException(status_code=400, detail="Missing required field")
    logger.error("%s failed: %s", context, error)
    return HTTPException(status_code=500, detail=f"{context} failed")
