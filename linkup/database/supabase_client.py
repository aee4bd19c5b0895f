import logging

from supabase import create_client, Client
from linkup.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Process-wide PostgREST client, created on first use."""

    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        # service_role key: the backend owns authorization, row level security is bypassed
        if cls._client is None:
            if not settings.supabase_url or not settings.supabase_service_role_key:
                raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
            cls._client = create_client(settings.supabase_url, settings.supabase_service_role_key)
            logger.info("Supabase client created for %s", settings.supabase_url)
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_supabase() -> Client:
    """FastAPI dependency returning the shared client"""
    return SupabaseClient.get_client()
