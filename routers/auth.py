# Auth Router for the InfluenceTie API
# Registration, login, one-time codes, password reset and Google sign-in

import json
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from auth.dependencies import get_current_user
from auth.google_oauth import GoogleOAuthClient, get_google_client
from config.app_config import FRONTEND_URL
from core.errors import AppError
from core.responses import success_response
from database.config import get_db
from database.models import User
from schemas.auth import (
    EmailRequest,
    LoginRequest,
    OtpVerifyRequest,
    PasswordResetConfirmRequest,
    RegisterRequest,
)
from schemas.responses import user_to_response
from services.account_service import get_account_service
from services.identity_service import get_identity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ============================================================================
# PASSWORD ACCOUNTS
# ============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and send an email verification code."""
    result = get_account_service(db).register(data)
    return success_response(
        "User registered successfully. Please verify your email with the OTP sent.",
        result,
        status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    result = get_account_service(db).login(data.email, data.password)
    return success_response("Login successful", result)


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    return success_response("User retrieved successfully", {"user": user_to_response(current_user)})


# ============================================================================
# ONE-TIME CODES
# ============================================================================

@router.post("/otp/verify")
async def verify_otp(data: OtpVerifyRequest, db: Session = Depends(get_db)):
    result = get_account_service(db).verify_otp(data.email, data.otp)
    return success_response("Email verified successfully", result)


@router.post("/otp/resend")
async def resend_otp(data: EmailRequest, db: Session = Depends(get_db)):
    result = get_account_service(db).resend_otp(data.email)
    if result.get("alreadyVerified"):
        return success_response("Email is already verified", result)
    return success_response("OTP sent successfully", result)


@router.post("/password/reset/request")
async def request_password_reset(data: EmailRequest, db: Session = Depends(get_db)):
    result = get_account_service(db).request_password_reset(data.email)
    return success_response("Password reset code sent", result)


@router.post("/password/reset/confirm")
async def confirm_password_reset(data: PasswordResetConfirmRequest, db: Session = Depends(get_db)):
    result = get_account_service(db).confirm_password_reset(data.email, data.otp, data.new_password)
    return success_response("Password reset successfully", result)


# ============================================================================
# GOOGLE SIGN-IN
# ============================================================================

@router.get("/google")
async def google_login(google: GoogleOAuthClient = Depends(get_google_client)):
    """Redirect the browser to Google's consent screen."""
    return RedirectResponse(google.authorization_url(), status_code=status.HTTP_302_FOUND)


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    google: GoogleOAuthClient = Depends(get_google_client),
):
    """
    Finish the authorization-code flow.
    The frontend receives the token and a user summary as query parameters.
    """
    failure_url = f"{FRONTEND_URL}/login?error=oauth_failed"

    if error or not code or not state:
        logger.warning(f"Google callback without code: error={error}")
        return RedirectResponse(failure_url, status_code=status.HTTP_302_FOUND)

    try:
        profile = await google.fetch_profile(code, state)
        result = get_identity_service(db).link_or_create(
            email=profile.email,
            given_name=profile.given_name,
            family_name=profile.family_name,
            avatar=profile.picture,
            google_id=profile.google_id,
        )
    except AppError as e:
        logger.warning(f"Google sign-in failed: {e.message}")
        return RedirectResponse(failure_url, status_code=status.HTTP_302_FOUND)

    user = result["user"]
    summary = {
        "id": user["id"],
        "email": user["email"],
        "firstName": user["firstName"],
        "lastName": user["lastName"],
        "role": user["role"],
        "avatar": user["avatar"],
    }
    query = urlencode({"token": result["token"], "user": json.dumps(summary)})
    return RedirectResponse(f"{FRONTEND_URL}/auth/callback?{query}", status_code=status.HTTP_302_FOUND)
