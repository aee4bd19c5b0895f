"""
Core dependencies for route protection: session cookie -> JWT -> revocation -> identity
"""

from fastapi import Depends, HTTPException, Request, status
from linkup.config import settings
from linkup.core.security import decode_token
from linkup.database.supabase_client import get_supabase
from linkup.modules.auth.revocation import RevocationStore
from supabase import Client
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLE_COMPANY = "company"


def get_revocation_store(supabase: Client = Depends(get_supabase)) -> RevocationStore:
    return RevocationStore(supabase)


def _identity_from_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    sub = payload["sub"]
    return {
        "id": int(sub) if str(sub).isdigit() else sub,
        "role": payload.get("role", ROLE_USER),
        "email": payload.get("email"),
        "jti": payload["jti"],
        "exp": payload.get("exp"),
    }


def get_current_identity(
    request: Request,
    revocations: RevocationStore = Depends(get_revocation_store),
) -> Dict[str, Any]:
    """Extract the authenticated identity from the httpOnly session cookie"""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    payload = decode_token(token)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    if revocations.is_revoked(payload["jti"]):
        logger.info("Rejected revoked token jti=%s", payload["jti"])
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token revoked")
    identity = _identity_from_payload(payload)
    request.state.identity = identity
    return identity


def require_role(*roles: str):
    """Factory function to create a role check dependency"""
    def check_role(identity: Dict[str, Any] = Depends(get_current_identity)) -> Dict[str, Any]:
        if identity["role"] not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {' or '.join(roles)}"
            )
        return identity
    return check_role
