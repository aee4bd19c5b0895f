import logging

from fastapi.responses import JSONResponse

from linkup.config import settings

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
                    (b"Permissions-Policy", b"geolocation=(), microphone=(), camera=(), payment=(), usb=()"),
                ])
                if settings.is_production:
                    message["headers"].append(
                        (b"Strict-Transport-Security", b"max-age=31536000; includeSubDomains; preload")
                    )
            await send(message)

        await self.app(scope, receive, send_with_headers)


class RequestSizeLimitMiddleware:
    """Reject requests whose declared Content-Length exceeds max_size with 413."""

    def __init__(self, app, max_size: int):
        self.app = app
        self.max_size = max_size

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    length = int(value)
                except ValueError:
                    break
                if length > self.max_size:
                    logger.warning("Request too large: %s bytes on %s", length, scope.get("path"))
                    response = JSONResponse(
                        status_code=413,
                        content={"detail": f"Request too large, maximum is {self.max_size // (1024 * 1024)} MB"},
                    )
                    await response(scope, receive, send)
                    return
                break
        await self.app(scope, receive, send)
