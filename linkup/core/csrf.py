"""
CSRF protection using the double submit cookie pattern.

Every HTTP response carries a fresh token, both in the X-CSRF-Token header and
in a cookie readable by scripts. Mutating requests must echo the cookie value
in the X-CSRF-Token header. Compatible with the httpOnly JWT session cookie.
"""

import hmac
import logging
import secrets
from http.cookies import SimpleCookie
from typing import Iterable, Tuple

from fastapi.responses import JSONResponse
from starlette.requests import Request

from linkup.config import settings

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
CSRF_MAX_AGE_SECONDS = 24 * 60 * 60
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
EXEMPT_PATHS: Tuple[str, ...] = (
    "/auth/users/login",
    "/auth/users/signup",
    "/auth/companies/login",
    "/auth/companies/signup",
    "/health",
)


def generate_csrf_token() -> str:
    return secrets.token_hex(16)


def build_csrf_cookie(token: str) -> bytes:
    cookie: SimpleCookie = SimpleCookie()
    name = settings.csrf_cookie_name
    cookie[name] = token
    cookie[name]["path"] = "/"
    cookie[name]["max-age"] = CSRF_MAX_AGE_SECONDS
    cookie[name]["samesite"] = "strict" if settings.is_production else "lax"
    if settings.is_production:
        cookie[name]["secure"] = True
    return cookie.output(header="").strip().encode("latin-1")


class CSRFMiddleware:
    def __init__(self, app, exempt_paths: Iterable[str] = EXEMPT_PATHS):
        self.app = app
        self.exempt_paths = tuple(exempt_paths)

    def _is_exempt(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.exempt_paths)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        token = generate_csrf_token()

        async def send_with_token(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (CSRF_HEADER.lower().encode("latin-1"), token.encode("latin-1")),
                    (b"set-cookie", build_csrf_cookie(token)),
                ])
            await send(message)

        request = Request(scope)
        if request.method in MUTATING_METHODS and not self._is_exempt(request.url.path):
            header_token = request.headers.get(CSRF_HEADER)
            cookie_token = request.cookies.get(settings.csrf_cookie_name)
            if not header_token or not cookie_token:
                logger.warning(
                    "[CSRF] Missing token method=%s path=%s header=%s cookie=%s",
                    request.method, request.url.path, bool(header_token), bool(cookie_token),
                )
                response = JSONResponse(status_code=403, content={"detail": "CSRF token missing"})
                await response(scope, receive, send_with_token)
                return
            if not hmac.compare_digest(header_token, cookie_token):
                logger.warning("[CSRF] Invalid token method=%s path=%s", request.method, request.url.path)
                response = JSONResponse(status_code=403, content={"detail": "CSRF token invalid"})
                await response(scope, receive, send_with_token)
                return

        await self.app(scope, receive, send_with_token)
