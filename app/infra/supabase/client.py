"""Supabase client factory"""
from typing import Optional

from supabase import Client, ClientOptions, create_client

from app import config


def _require_settings() -> tuple[str, str]:
    url = config.SUPABASE_URL
    key = config.SUPABASE_ANON_KEY

    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

    return url, key


def create_request_client(access_token: Optional[str] = None) -> Client:
    """
    Create a Supabase client scoped to a single request.

    Clients are never shared between requests: the auth helper keeps the
    signed-in session in memory, and the PostgREST headers carry the
    caller's JWT so row level security applies to every table query.
    """
    url, key = _require_settings()

    client = create_client(
        url,
        key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )

    if access_token:
        client.postgrest.auth(access_token)

    return client
