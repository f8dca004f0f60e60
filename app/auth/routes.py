# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Password sign-in through Supabase Auth plus token/user lookups.
# Sign-up and password reset stay in the Supabase dashboard.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import AuthError

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, SignInRequest, SignInResponse, UserResponse
from app.exceptions import BackendOperationError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signin", response_model=SignInResponse)
async def sign_in(request: SignInRequest) -> SignInResponse:
    """
    Sign in with email and password.

    Returns the Supabase session tokens. Send access_token as a Bearer
    token on every other endpoint.

    Raises:
        401: If the credentials are wrong
    """
    client = SupabaseClient.get_anon_client()

    try:
        response = client.auth.sign_in_with_password(
            {"email": request.email, "password": request.password}
        )
    except AuthError as e:
        logger.info(f"Sign-in failed for {request.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email hoặc mật khẩu không đúng",
        )
    except Exception as e:
        logger.error(f"Sign-in error: {e}")
        raise BackendOperationError("Không thể đăng nhập", e) from e

    session = response.session
    user = response.user
    if session is None or user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email hoặc mật khẩu không đúng",
        )

    logger.info(f"User signed in: {user.id}")
    return SignInResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        expires_at=session.expires_at,
        user=UserResponse(
            id=user.id,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        ),
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current user's profile.

    Falls back to the token's id/email when no public.users row exists yet.
    """
    try:
        profile = SupabaseClient.fetch_single("users", user.id)
    except Exception as e:
        logger.warning(f"Could not fetch user profile: {e}")
        profile = None

    if profile:
        return UserResponse(**profile)

    return UserResponse(id=user.id, email=user.email)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """Check that the current token is valid."""
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email,
    }
