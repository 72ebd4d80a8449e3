"""Domain models for Auth feature"""

from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user as seen by this service"""
    id: str
    email: Optional[str] = None


class SessionTokens(BaseModel):
    """Tokens carried in the session cookies"""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token


class AuthSession(BaseModel):
    """Session returned by sign in, sign up and refresh"""
    access_token: str
    refresh_token: str
    expires_at: Optional[int] = None
    user: User

    def tokens(self) -> SessionTokens:
        return SessionTokens(access_token=self.access_token, refresh_token=self.refresh_token)


class AuthResult(BaseModel):
    """Outcome of sign in / sign up; session is None while email confirmation is pending"""
    user: Optional[User] = None
    session: Optional[AuthSession] = None
