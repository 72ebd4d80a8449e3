"""Session store backed by Supabase Auth"""

import logging
from typing import Optional, Protocol

from supabase import Client

from app.features.auth.domain import AuthResult, AuthSession, SessionTokens, User
from app.infra.supabase.client import create_request_client
from app.middleware.auth import TokenVerificationError, get_user_id_from_payload, verify_token

logger = logging.getLogger(__name__)


class SessionMissingError(Exception):
    """Raised when an operation needs a session and there is none"""

    def __init__(self, message: str = "Auth session missing!"):
        super().__init__(message)
        self.message = message


class SessionStore(Protocol):
    """Identity provider used by the route gate and the task actions"""

    @property
    def tokens(self) -> SessionTokens: ...

    async def get_current_user(self) -> Optional[User]: ...

    async def refresh(self) -> AuthSession: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult: ...

    async def sign_up(self, email: str, password: str) -> AuthResult: ...

    async def sign_out(self) -> None: ...


def _to_user(user) -> User:
    return User(id=str(user.id), email=getattr(user, "email", None))


def _to_result(response) -> AuthResult:
    user = _to_user(response.user) if response.user else None
    session = None
    if response.session:
        session = AuthSession(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            expires_at=response.session.expires_at,
            user=_to_user(response.session.user or response.user),
        )
    return AuthResult(user=user, session=session)


class SupabaseSessionStore:
    """
    Per-request view of the caller's Supabase session.

    The current user is resolved by verifying the access token against the
    project's JWKS. Sign in, sign up, refresh and sign out go to Supabase
    Auth and update the tokens held here, so the caller can write them back
    to the session cookies. Auth provider failures propagate as
    supabase.AuthError.
    """

    def __init__(self, tokens: Optional[SessionTokens] = None, client: Optional[Client] = None):
        self._tokens = tokens or SessionTokens()
        self._client = client

    @property
    def client(self) -> Client:
        """Request-scoped Supabase client carrying the current access token"""
        if self._client is None:
            self._client = create_request_client(self._tokens.access_token)
        return self._client

    @property
    def tokens(self) -> SessionTokens:
        return self._tokens

    def _set_tokens(self, tokens: SessionTokens) -> None:
        self._tokens = tokens
        # Keep table queries on this client in step with the new session
        if self._client is not None and tokens.access_token:
            self._client.postgrest.auth(tokens.access_token)

    async def get_current_user(self) -> Optional[User]:
        """
        Return the user behind the access token, None if absent or untrusted.

        JWKSUnavailableError propagates: an outage is not a rejected token.
        """
        token = self._tokens.access_token
        if not token:
            return None

        try:
            payload = await verify_token(token)
            user_id = get_user_id_from_payload(payload)
        except TokenVerificationError as e:
            logger.debug(f"Access token rejected: {e}")
            return None

        return User(id=user_id, email=payload.get("email"))

    async def refresh(self) -> AuthSession:
        """Exchange the refresh token for a new session"""
        if not self._tokens.refresh_token:
            raise SessionMissingError()

        result = _to_result(self.client.auth.refresh_session(self._tokens.refresh_token))
        if result.session is None:
            raise SessionMissingError()

        self._set_tokens(result.session.tokens())
        logger.info(f"Refreshed session for user {result.session.user.id}")
        return result.session

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        result = _to_result(response)
        if result.session:
            self._set_tokens(result.session.tokens())
        return result

    async def sign_up(self, email: str, password: str) -> AuthResult:
        response = self.client.auth.sign_up({"email": email, "password": password})
        result = _to_result(response)
        if result.session:
            self._set_tokens(result.session.tokens())
        return result

    async def sign_out(self) -> None:
        """End the session at Supabase and forget the local tokens"""
        token = self._tokens.access_token
        if not token:
            raise SessionMissingError()

        try:
            self.client.auth.admin.sign_out(token)
        finally:
            self._tokens = SessionTokens()


def create_session_store(tokens: Optional[SessionTokens] = None) -> SupabaseSessionStore:
    """Default SessionStore factory used by the route gate and the routers"""
    return SupabaseSessionStore(tokens)
