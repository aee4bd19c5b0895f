import math
import re
from typing import Any, Dict, List, Optional

from fastapi import Query
from pydantic import BaseModel

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100
SEARCH_MAX_LENGTH = 200
SHORT_SEARCH_MAX_LENGTH = 100

# Characters with a meaning inside PostgREST filter strings (or=(...), ilike patterns)
_FILTER_METACHARACTERS = re.compile(r"[,()*%\\]")


class Pagination(BaseModel):
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def range_end(self) -> int:
        return self.offset + self.limit - 1


def get_pagination(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
) -> Pagination:
    """Normalize page/limit query params; bad values fall back to defaults, limit is capped."""
    try:
        page_value = int(page) if page is not None else 1
    except ValueError:
        page_value = 1
    try:
        limit_value = int(limit) if limit is not None else DEFAULT_PAGE_LIMIT
    except ValueError:
        limit_value = DEFAULT_PAGE_LIMIT
    if page_value < 1:
        page_value = 1
    if limit_value < 1:
        limit_value = DEFAULT_PAGE_LIMIT
    elif limit_value > MAX_PAGE_LIMIT:
        limit_value = MAX_PAGE_LIMIT
    return Pagination(page=page_value, limit=limit_value)


def paginated_response(items: List[Any], pagination: Pagination, total: Optional[int]) -> Dict[str, Any]:
    total = total or 0
    return {
        "items": items or [],
        "page": pagination.page,
        "limit": pagination.limit,
        "total": total,
        "total_pages": math.ceil(total / pagination.limit),
        "has_next": pagination.page * pagination.limit < total,
        "has_prev": pagination.page > 1,
    }


def sanitize_search_param(value: Optional[str], max_length: int = SEARCH_MAX_LENGTH) -> Optional[str]:
    """Strip PostgREST metacharacters so user input cannot alter a filter expression."""
    if value is None:
        return None
    cleaned = _FILTER_METACHARACTERS.sub("", str(value)).strip()
    cleaned = cleaned[:max_length].strip()
    return cleaned or None
