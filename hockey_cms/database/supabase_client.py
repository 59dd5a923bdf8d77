import logging
from supabase import create_client, Client
from hockey_cms.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @staticmethod
    def _create(key: str, role: str) -> Client:
        if not settings.supabase_url or not key:
            raise RuntimeError(f"Supabase is not configured: SUPABASE_URL and the {role} key are required")
        logger.info(f"Creating Supabase client ({role})")
        return create_client(settings.supabase_url, key)

    @classmethod
    def get_client(cls) -> Client:
        """Anon-key client for CMS reads/writes and auth lookups"""
        if cls._client is None:
            cls._client = cls._create(settings.supabase_key, "anon")
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Used for saving generated content and the job queue."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = cls._create(settings.supabase_service_role_key, "service_role")
        return cls._service_client or cls.get_client()


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
