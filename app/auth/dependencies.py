# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase access tokens sent as "Authorization: Bearer <jwt>".
#
# Supports both:
# - ES256 (Supabase JWT signing keys) via the project JWKS
# - HS256 (legacy SUPABASE_JWT_SECRET)
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/households")
#   async def list_households(user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser
from app.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer()

TOKEN_AUDIENCE = "authenticated"

# JWKS cache
_jwks_cache: dict[str, Any] = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _jwks_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict[str, Any]:
    """Fetch the project's JWKS, cached for an hour."""
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        response = httpx.get(_jwks_url(), timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = now
        logger.debug("Fetched JWKS")
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys are better than none
        if not _jwks_cache:
            return {"keys": []}

    return _jwks_cache


def _signing_key(token: str) -> tuple[Any, str]:
    """
    Pick the verification key for a token from its header.

    Returns:
        Tuple of (key, algorithm)
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"No JWKS key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if the token is expired, invalid or has no user
    """
    key, algorithm = _signing_key(token)

    # An empty HS256 secret would accept tokens anyone can sign
    if algorithm == "HS256" and not key:
        logger.warning("HS256 token rejected: SUPABASE_JWT_SECRET is not configured")
        raise _unauthorized("Invalid token: HS256 verification is not configured")

    try:
        payload = jwt.decode(token, key, algorithms=[algorithm], audience=TOKEN_AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Authenticated user from the Bearer token.

    Every household, member, worship and dashboard route depends on this.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user
