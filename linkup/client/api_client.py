"""
HTTP client for the LinkUp API, used by front ends and scripts.

The session JWT travels in an httpOnly cookie kept by the underlying
httpx cookie jar. Mutating requests carry the CSRF token last issued by
the server in the X-CSRF-Token header.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from linkup.config import settings
from linkup.core.csrf import CSRF_HEADER, MUTATING_METHODS

logger = logging.getLogger(__name__)

CSRF_ENDPOINT = "/auth/csrf"


class ApiError(Exception):
    """The server answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


class NetworkError(Exception):
    """The server could not be reached in time. Safe to retry."""

    retryable = True

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        return "Validation error"
    return response.reason_phrase


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.base_url = base_url or settings.api_url
        self.http = http_client or httpx.Client(base_url=self.base_url, timeout=self.timeout)
        self.csrf_token: Optional[str] = None

    def close(self) -> None:
        self.http.close()

    def _remember_csrf(self, response: httpx.Response) -> None:
        token = response.headers.get(CSRF_HEADER)
        if token:
            self.csrf_token = token

    def refresh_csrf_token(self) -> Optional[str]:
        """Fetch a fresh CSRF token (the server attaches one to every response)."""
        self.request("GET", CSRF_ENDPOINT)
        return self.csrf_token

    def _send(self, method: str, endpoint: str, json: Any, params: Optional[Dict[str, Any]],
              timeout: Optional[float]) -> httpx.Response:
        headers = {}
        if method in MUTATING_METHODS and self.csrf_token:
            headers[CSRF_HEADER] = self.csrf_token
        try:
            response = self.http.request(
                method,
                endpoint,
                json=json,
                params=params,
                headers=headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request timed out: %s %s", method, endpoint)
            raise NetworkError(f"Request timed out: {method} {endpoint}", timeout=True) from e
        except httpx.TransportError as e:
            logger.warning("Network error on %s %s: %s", method, endpoint, e)
            raise NetworkError(f"Server unreachable: {e}") from e
        self._remember_csrf(response)
        return response

    def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None for empty responses)."""
        method = method.upper()
        if method in MUTATING_METHODS and not self.csrf_token:
            self.refresh_csrf_token()

        response = self._send(method, endpoint, json, params, timeout)
        if response.status_code == 403 and method in MUTATING_METHODS:
            message = _error_message(response)
            if message.startswith("CSRF token"):
                # The rejected response carried a fresh token; retry once with it
                logger.info("CSRF token rejected on %s %s, retrying", method, endpoint)
                response = self._send(method, endpoint, json, params, timeout)

        if response.status_code >= 400:
            raise ApiError(response.status_code, _error_message(response), _safe_json(response))
        return _safe_json(response)

    def get(self, endpoint: str, **kwargs) -> Any:
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", endpoint, json=json, **kwargs)

    def put(self, endpoint: str, json: Any = None, **kwargs) -> Any:
        return self.request("PUT", endpoint, json=json, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> Any:
        return self.request("DELETE", endpoint, **kwargs)


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
