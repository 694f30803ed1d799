from supabase import create_client, Client
from wctips.config.settings import settings
from typing import Optional


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Shared anon client. Only used for stateless calls such as validating a JWT."""
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def create_request_client(cls, access_token: Optional[str] = None) -> Client:
        """Fresh client for one request; the caller's JWT is forwarded to PostgREST so RLS applies."""
        client = create_client(settings.supabase_url, settings.supabase_key)
        if access_token:
            client.postgrest.auth(access_token)
        return client


def get_supabase() -> Client:
    return SupabaseClient.get_client()
