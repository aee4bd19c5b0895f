"""Parsing of timestamps as PostgREST serialises them."""

import re
from datetime import datetime, timezone
from typing import Any, Optional

# PostgREST trims trailing zeros ("09:00:00.12+00:00"); fromisoformat before 3.11 wants 3 or 6 digits
_FRACTION_RE = re.compile(r"\.(\d+)(?=[+-]\d{2}(?::?\d{2})?$|$)")
_SHORT_OFFSET_RE = re.compile(r"([+-]\d{2})$")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Aware datetime for a timestamptz/date value, None when missing or unparseable"""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip().replace("Z", "+00:00")
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        if "T" in text or " " in text:
            text = _SHORT_OFFSET_RE.sub(r"\1:00", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
