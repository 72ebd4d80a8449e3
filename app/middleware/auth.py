"""
Supabase JWT verification

Access tokens issued by Supabase Auth are verified locally against the
project's JWKS (public keys), so resolving the current user does not need a
round trip to the auth server on every request.
"""
import time
import logging
from typing import Optional
from jose import JOSEError, jwt, jwk
import httpx

from app import config

logger = logging.getLogger(__name__)

# JWKS cache
_jwks_cache: Optional[dict] = None
_jwks_cache_time: float = 0
JWKS_CACHE_DURATION = 60 * 60  # 1 hour in seconds

# JWT configuration
JWT_AUDIENCE = "authenticated"


class TokenVerificationError(Exception):
    """Raised when an access token cannot be trusted"""


class JWKSUnavailableError(Exception):
    """
    Raised when the signing keys cannot be fetched and none are cached.

    Says nothing about the token itself, so callers must not treat it as a
    rejected (and therefore refreshable) session.
    """


def get_supabase_url() -> str:
    """Get Supabase URL from configuration"""
    url = config.SUPABASE_URL
    if not url:
        raise ValueError("SUPABASE_URL must be set")
    return url


def get_jwks_url() -> str:
    """Get JWKS URL from Supabase URL"""
    return f"{get_supabase_url()}/auth/v1/.well-known/jwks.json"


def get_jwt_issuer() -> str:
    """Get JWT issuer from Supabase URL"""
    return f"{get_supabase_url()}/auth/v1"


def reset_jwks_cache():
    """Drop the cached JWKS (useful for testing)"""
    global _jwks_cache, _jwks_cache_time
    _jwks_cache = None
    _jwks_cache_time = 0


async def get_jwks() -> dict:
    """
    Fetch and cache JWKS from Supabase
    Returns cached JWKS if available and not expired
    """
    global _jwks_cache, _jwks_cache_time

    now = time.time()

    # Return cached JWKS if available and not expired
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_DURATION:
        return _jwks_cache

    jwks_url = get_jwks_url()
    logger.info(f"Fetching JWKS from Supabase: {jwks_url}")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            _jwks_cache = response.json()
            _jwks_cache_time = now
            logger.info("JWKS cached successfully")
            return _jwks_cache
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch JWKS: {e}")
        # If we have a cached version, use it even if expired
        if _jwks_cache:
            logger.warning("Using expired JWKS cache due to fetch failure")
            return _jwks_cache
        raise JWKSUnavailableError("Failed to fetch authentication keys") from e


async def verify_token(token: str) -> dict:
    """
    Verify a Supabase JWT token using JWKS (public keys).
    Supports ES256 (recommended) and RS256 (legacy) signing keys.

    Returns the decoded JWT payload
    Raises TokenVerificationError if verification fails, JWKSUnavailableError
    if the keys cannot be obtained
    """
    jwks = await get_jwks()

    try:
        unverified_header = jwt.get_unverified_header(token)
    except jwt.JWTError as e:
        raise TokenVerificationError(f"Invalid token: {e}") from e

    kid = unverified_header.get("kid")
    if not kid:
        raise TokenVerificationError("Token missing key ID (kid)")

    # Find the matching key in JWKS
    key_data = None
    for jwk_key in jwks.get("keys", []):
        if jwk_key.get("kid") == kid:
            key_data = jwk_key
            break

    if not key_data:
        raise TokenVerificationError(f"Key with ID '{kid}' not found in JWKS")

    try:
        key = jwk.construct(key_data)
        return jwt.decode(
            token,
            key,
            algorithms=["ES256", "RS256"],
            audience=JWT_AUDIENCE,
            issuer=get_jwt_issuer(),
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenVerificationError("Token has expired") from e
    except jwt.JWTClaimsError as e:
        raise TokenVerificationError(f"Token validation failed: {e}") from e
    except jwt.JWTError as e:
        raise TokenVerificationError(f"Invalid token: {e}") from e
    except JOSEError as e:
        raise TokenVerificationError(f"Unusable signing key: {e}") from e


def get_user_id_from_payload(payload: dict) -> str:
    """
    Extract user ID from JWT payload
    Raises TokenVerificationError if user ID is not present
    """
    user_id = payload.get("sub")
    if not user_id:
        raise TokenVerificationError("Invalid token: no user ID")
    return user_id
