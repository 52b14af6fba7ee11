from typing import Any, Dict, Optional
from supabase import create_client, Client
from app.config.settings import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use in background analysis."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def create_session_client(cls) -> Client:
        """
        Fresh anon client for sign-up and sign-in. supabase-py copies a signed-in
        session into its client's Authorization header, so this must never be
        the shared client.
        """
        return create_client(settings.supabase_url, settings.supabase_anon_key or settings.supabase_key)

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_session_supabase() -> Client:
    return SupabaseClient.create_session_client()


def first_row(result) -> Optional[Dict[str, Any]]:
    """Return the first row of a query result, or None when nothing matched."""
    if result is None or not result.data:
        return None
    return result.data[0]
