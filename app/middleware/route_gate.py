"""
Route gate middleware

Runs before every route: refreshes the Supabase session carried in the
cookies, then redirects signed-in users away from the auth pages and
anonymous users away from the dashboard. Static assets are never touched.
"""
import logging
import re
from enum import Enum
from typing import Callable, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from supabase import AuthError

from app import config
from app.features.auth.cookies import clear_session_cookies, read_session_tokens, write_session_cookies
from app.features.auth.domain import SessionTokens, User
from app.features.auth.session import SessionMissingError, SessionStore, create_session_store

logger = logging.getLogger(__name__)

EXCLUDED_PATH_PATTERN = re.compile(
    r"^/(?:_next/static|_next/image|static/|favicon\.ico)"
    r"|\.(?:svg|png|jpg|jpeg|gif|webp)$"
)

AUTH_PAGES = (config.LOGIN_PATH, config.SIGNUP_PATH)


class RouteClass(str, Enum):
    AUTH_PAGE = "auth_page"
    PROTECTED = "protected"
    OTHER = "other"


class CookieAction(str, Enum):
    WRITE = "write"
    CLEAR = "clear"


def is_excluded_path(path: str) -> bool:
    """Static assets and images bypass the gate entirely"""
    return EXCLUDED_PATH_PATTERN.search(path) is not None


def classify_path(path: str) -> RouteClass:
    if path in AUTH_PAGES:
        return RouteClass.AUTH_PAGE
    if path == config.DASHBOARD_PATH or path.startswith(config.DASHBOARD_PATH + "/"):
        return RouteClass.PROTECTED
    return RouteClass.OTHER


def redirect_target(user: Optional[User], route: RouteClass) -> Optional[str]:
    """Where the request must go instead, None to let it through"""
    if user is not None and route == RouteClass.AUTH_PAGE:
        return config.DASHBOARD_PATH
    if user is None and route == RouteClass.PROTECTED:
        return config.LOGIN_PATH
    return None


async def resolve_session(store: SessionStore) -> Tuple[Optional[User], Optional[CookieAction]]:
    """
    Validate the session held by store, refreshing it when the access token
    is no longer usable.

    Returns the user (None when anonymous) and what to do with the session
    cookies on the way out.
    """
    tokens = store.tokens
    if tokens.is_empty():
        return None, None

    try:
        user = await store.get_current_user()
        if user is not None:
            return user, None

        if not tokens.refresh_token:
            return None, CookieAction.CLEAR

        session = await store.refresh()
        return session.user, CookieAction.WRITE

    except (AuthError, SessionMissingError) as e:
        logger.info(f"Session refresh rejected: {getattr(e, 'message', e)}")
        return None, CookieAction.CLEAR
    except Exception as e:
        logger.error(f"Session check failed, treating request as anonymous: {e}", exc_info=True)
        return None, None


class RouteGateMiddleware(BaseHTTPMiddleware):
    """Session-aware redirects between the auth pages and the dashboard"""

    def __init__(self, app, session_store_factory: Optional[Callable[[SessionTokens], SessionStore]] = None):
        super().__init__(app)
        self.session_store_factory = session_store_factory

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if is_excluded_path(path):
            return await call_next(request)

        factory = self.session_store_factory or create_session_store
        store = factory(read_session_tokens(request))
        user, cookie_action = await resolve_session(store)

        # Routers read these instead of re-parsing possibly stale cookies
        request.state.user = user
        request.state.session_tokens = SessionTokens() if cookie_action == CookieAction.CLEAR else store.tokens

        target = redirect_target(user, classify_path(path))
        if target:
            logger.debug(f"Redirecting {path} -> {target}")
            response: Response = RedirectResponse(target, status_code=307)
        else:
            response = await call_next(request)

        if cookie_action == CookieAction.WRITE:
            write_session_cookies(response, store.tokens)
        elif cookie_action == CookieAction.CLEAR:
            clear_session_cookies(response)

        return response
