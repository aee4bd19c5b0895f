import logging
import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import HTTPException
from supabase import Client

from linkup.core.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

# jti -> unix expiry. Only revocations are cached, so a revoke is never delayed.
_REVOKED_CACHE: Dict[str, float] = {}
_REVOKED_CACHE_MAX_SIZE = 1000


def _remember(jti: str, exp: float) -> None:
    if len(_REVOKED_CACHE) >= _REVOKED_CACHE_MAX_SIZE:
        now = time.time()
        for key in [k for k, v in _REVOKED_CACHE.items() if v <= now]:
            del _REVOKED_CACHE[key]
    if len(_REVOKED_CACHE) < _REVOKED_CACHE_MAX_SIZE:
        _REVOKED_CACHE[jti] = exp


def clear_revocation_cache() -> None:
    _REVOKED_CACHE.clear()


class RevocationStore:
    """Invalidated JWTs, keyed by their jti claim (table revoked_token)."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def revoke(self, jti: str, exp: float) -> None:
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc).isoformat()
        try:
            self.supabase.table("revoked_token").insert({
                "jti": jti,
                "expires_at": expires_at,
                "revoked_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            logger.error("Error revoking token %s: %s", jti, e)
            raise HTTPException(status_code=500, detail="Logout failed")
        _remember(jti, exp)

    def is_revoked(self, jti: str) -> bool:
        cached_exp = _REVOKED_CACHE.get(jti)
        if cached_exp is not None:
            if cached_exp > time.time():
                return True
            del _REVOKED_CACHE[jti]
        try:
            result = self.supabase.table("revoked_token")\
                .select("jti, expires_at")\
                .eq("jti", jti)\
                .limit(1)\
                .execute()
        except Exception as e:
            # Fail closed: an unverifiable token is not accepted
            logger.error("Error checking revocation for %s: %s", jti, e)
            return True
        if not result.data:
            return False
        expires_at = result.data[0].get("expires_at")
        expiry = parse_timestamp(expires_at)
        if expiry:
            _remember(jti, expiry.timestamp())
        else:
            logger.debug("Unparseable expires_at for revoked token %s: %r", jti, expires_at)
        return True

    def purge_expired(self) -> int:
        """Delete revocation rows whose token would have expired anyway."""
        now = datetime.now(timezone.utc).isoformat()
        result = self.supabase.table("revoked_token")\
            .delete()\
            .lt("expires_at", now)\
            .execute()
        return len(result.data or [])
