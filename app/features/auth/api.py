"""Auth pages: login, signup and logout"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field
from supabase import AuthError

from app import config
from app.features.auth.cookies import clear_session_cookies, write_session_cookies
from app.features.auth.dependencies import get_session_store
from app.features.auth.domain import AuthResult, User
from app.features.auth.session import SupabaseSessionStore
from app.features.tasks.dependencies import get_task_actions
from app.features.tasks.service import TaskActions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

UNEXPECTED_ERROR = "An unexpected error occurred"


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class AuthPageResponse(BaseModel):
    page: str
    fields: list[str]
    alternate_path: str


class AuthResponse(BaseModel):
    user: Optional[User] = None
    redirect_to: Optional[str] = None
    message: Optional[str] = None


def _finish_auth(result: AuthResult, response: Response) -> AuthResponse:
    if result.session is None:
        # Sign up succeeded but the project requires email confirmation first
        return AuthResponse(user=result.user, message="Check your email to confirm your account")

    write_session_cookies(response, result.session.tokens())
    return AuthResponse(user=result.session.user, redirect_to=config.DASHBOARD_PATH)


@router.get(config.LOGIN_PATH, response_model=AuthPageResponse)
async def login_page():
    return AuthPageResponse(page="login", fields=["email", "password"], alternate_path=config.SIGNUP_PATH)


@router.get(config.SIGNUP_PATH, response_model=AuthPageResponse)
async def signup_page():
    return AuthPageResponse(page="signup", fields=["email", "password"], alternate_path=config.LOGIN_PATH)


@router.post(config.LOGIN_PATH, response_model=AuthResponse)
async def login(
    request: CredentialsRequest,
    response: Response,
    session_store: SupabaseSessionStore = Depends(get_session_store),
):
    """
    Sign in with email and password.

    On success the session cookies are set and the client is pointed at the
    dashboard. Provider errors (bad credentials, unconfirmed email) are
    returned as 400 with the provider's message.
    """
    try:
        result = await session_store.sign_in_with_password(request.email, request.password)
    except AuthError as e:
        logger.info(f"Sign in rejected for {request.email}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error during sign in: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=UNEXPECTED_ERROR)

    if result.user is None:
        raise HTTPException(status_code=400, detail="Invalid login credentials")

    logger.info(f"User {result.user.id} signed in")
    return _finish_auth(result, response)


@router.post(config.SIGNUP_PATH, response_model=AuthResponse)
async def signup(
    request: CredentialsRequest,
    response: Response,
    session_store: SupabaseSessionStore = Depends(get_session_store),
):
    """Create an account; signs the user in when the project does not require confirmation"""
    try:
        result = await session_store.sign_up(request.email, request.password)
    except AuthError as e:
        logger.info(f"Sign up rejected for {request.email}: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error during sign up: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=UNEXPECTED_ERROR)

    if result.user is None:
        raise HTTPException(status_code=400, detail=UNEXPECTED_ERROR)

    logger.info(f"User {result.user.id} signed up")
    return _finish_auth(result, response)


@router.post("/logout")
async def logout(actions: TaskActions = Depends(get_task_actions)):
    """End the session and send the browser back to the login page"""
    result = await actions.logout()
    if result.error:
        logger.warning(f"Logout reported an error: {result.error}")

    response = RedirectResponse(config.LOGIN_PATH, status_code=303)
    clear_session_cookies(response)
    return response
