"""Session cookie helpers"""

from starlette.requests import Request
from starlette.responses import Response

from app import config
from app.features.auth.domain import SessionTokens


def read_session_tokens(request: Request) -> SessionTokens:
    return SessionTokens(
        access_token=request.cookies.get(config.ACCESS_TOKEN_COOKIE) or None,
        refresh_token=request.cookies.get(config.REFRESH_TOKEN_COOKIE) or None,
    )


def write_session_cookies(response: Response, tokens: SessionTokens) -> None:
    for name, value in (
        (config.ACCESS_TOKEN_COOKIE, tokens.access_token),
        (config.REFRESH_TOKEN_COOKIE, tokens.refresh_token),
    ):
        if not value:
            continue
        response.set_cookie(
            name,
            value,
            max_age=config.SESSION_COOKIE_MAX_AGE,
            path="/",
            httponly=True,
            secure=config.SESSION_COOKIE_SECURE,
            samesite="lax",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(config.ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(config.REFRESH_TOKEN_COOKIE, path="/")
