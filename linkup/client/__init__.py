from linkup.client.api_client import ApiClient, ApiError, NetworkError
from linkup.client.session import AuthSession, SessionState

__all__ = ["ApiClient", "ApiError", "NetworkError", "AuthSession", "SessionState"]
