"""FastAPI dependencies for the caller's session"""

from fastapi import Request

from app.features.auth.cookies import read_session_tokens
from app.features.auth.session import SupabaseSessionStore, create_session_store


def get_session_store(request: Request) -> SupabaseSessionStore:
    """Session store for this request, using tokens refreshed by the route gate when present"""
    tokens = getattr(request.state, "session_tokens", None) or read_session_tokens(request)
    return create_session_store(tokens)
