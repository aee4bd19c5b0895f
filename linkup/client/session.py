"""
Client-side session lifecycle: login, identity check and logout.

The session itself is the httpOnly cookie held by the HTTP client; this
object only mirrors what the server says about it.
"""

import logging
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from linkup.client.api_client import ApiClient, ApiError, NetworkError
from linkup.config import settings

logger = logging.getLogger(__name__)

WHOAMI_ENDPOINT = "/auth/me"
HYDRATION_RETRIES = 3
HYDRATION_DELAY_SECONDS = 0.3


class SessionState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    # server did not answer: not logged out, the check may be retried
    UNREACHABLE = "unreachable"


class AuthSession:
    def __init__(
        self,
        api: ApiClient,
        auth_check_timeout: Optional[float] = None,
        hydration_retries: int = HYDRATION_RETRIES,
        hydration_delay: float = HYDRATION_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api = api
        self.auth_check_timeout = auth_check_timeout if auth_check_timeout is not None else settings.auth_check_timeout
        self.hydration_retries = max(1, hydration_retries)
        self.hydration_delay = hydration_delay
        self._sleep = sleep
        self.state = SessionState.UNKNOWN
        self.role: Optional[str] = None
        self.profile: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @property
    def is_retryable(self) -> bool:
        return self.state == SessionState.UNREACHABLE

    def _set_authenticated(self, role: str, profile: Dict[str, Any]) -> None:
        self.state = SessionState.AUTHENTICATED
        self.role = role
        self.profile = profile
        self.error = None

    def _clear(self, state: SessionState = SessionState.UNAUTHENTICATED, error: Optional[str] = None) -> None:
        self.state = state
        self.role = None
        self.profile = None
        self.error = error

    def _whoami(self) -> Dict[str, Any]:
        """GET /auth/me bounded by a wall-clock deadline.

        httpx timeouts apply per connect/read/write phase, so a server trickling
        bytes can hold a plain request well past auth_check_timeout.
        """
        outcome: Dict[str, Any] = {}

        def worker() -> None:
            try:
                outcome["identity"] = self.api.get(WHOAMI_ENDPOINT, timeout=self.auth_check_timeout)
            except Exception as e:
                outcome["error"] = e

        thread = threading.Thread(target=worker, name="linkup-auth-check", daemon=True)
        thread.start()
        thread.join(self.auth_check_timeout)
        if thread.is_alive():
            raise NetworkError(f"Identity check exceeded {self.auth_check_timeout}s", timeout=True)
        if "error" in outcome:
            raise outcome["error"]
        return outcome["identity"]

    def check_auth(self) -> bool:
        """Ask the server who owns the session cookie, without waiting longer than auth_check_timeout."""
        try:
            identity = self._whoami()
        except NetworkError as e:
            logger.warning("Identity check failed: %s", e)
            self._clear(SessionState.UNREACHABLE, str(e))
            return False
        except ApiError as e:
            if e.status_code not in (401, 403):
                logger.warning("Identity check returned %s: %s", e.status_code, e.message)
            self._clear(error=None if e.status_code in (401, 403) else e.message)
            return False
        self._set_authenticated(identity["role"], identity["profile"])
        return True

    def _hydrate(self, fallback_role: str, fallback_profile: Dict[str, Any]) -> bool:
        for attempt in range(1, self.hydration_retries + 1):
            if self.check_auth():
                return True
            if self.state == SessionState.UNAUTHENTICATED:
                # the cookie set by login was not accepted; retrying will not help
                break
            logger.info("Profile hydration attempt %s/%s failed", attempt, self.hydration_retries)
            if attempt < self.hydration_retries:
                self._sleep(self.hydration_delay)

        if self.state == SessionState.UNREACHABLE:
            # Logged in but the profile could not be fetched: keep the minimal profile from login
            logger.warning("Using login profile, hydration failed: %s", self.error)
            self._set_authenticated(fallback_role, fallback_profile)
            return True
        self._clear(error="Session could not be established")
        return False

    def _login(self, endpoint: str, credentials: Dict[str, str]) -> bool:
        try:
            session = self.api.post(endpoint, json=credentials)
        except NetworkError as e:
            self._clear(SessionState.UNREACHABLE, str(e))
            return False
        except ApiError as e:
            self._clear(error=e.message)
            return False
        return self._hydrate(session.get("role", "user"), session)

    def login(self, email: str, password: str) -> bool:
        """Candidate or admin login"""
        return self._login("/auth/users/login", {"email": email, "password": password})

    def login_company(self, recruiter_mail: str, password: str) -> bool:
        return self._login("/auth/companies/login", {"recruiter_mail": recruiter_mail, "password": password})

    def logout(self) -> None:
        """Revoke the session server-side; local state is cleared even if the server cannot be reached."""
        endpoint = "/auth/companies/logout" if self.role == "company" else "/auth/users/logout"
        try:
            self.api.post(endpoint)
        except (ApiError, NetworkError) as e:
            logger.warning("Logout request failed, clearing local session anyway: %s", e)
        finally:
            self._clear()
