"""
Auth router: signup, signin, OTP verification, token refresh, logout, profile.

Signup:
  1. POST /auth/signup            → create account + email a signup OTP
  2. POST /auth/signup/verify-otp → verify OTP → email marked verified

Signin (two steps, tokens only after the OTP):
  1. POST /auth/signin            → check credentials + email a signin OTP
  2. POST /auth/signin/verify-otp → verify OTP → access + refresh tokens

Sessions:
  POST /auth/refresh → single-use rotation of the refresh token
  POST /auth/logout  → revoke one refresh token, or all of them
"""
from fastapi import APIRouter, Depends, BackgroundTasks, Request
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.rate_limiter import limiter, SIGNUP_LIMIT, SIGNIN_LIMIT, OTP_VERIFY_LIMIT, REFRESH_LIMIT
from app.models.enums import OTPPurpose
from app.models.user import User
from app.schemas.auth import (
    SignupRequest, VerifyOTPRequest, SigninRequest,
    RefreshTokenRequest, LogoutRequest, TokenResponse, MessageResponse,
)
from app.schemas.user import ProfileOut
from app.services import auth_service
from app.services.email_service import send_otp_email

router = APIRouter()


# ── Signup ────────────────────────────────────────────────────────────────────

@router.post("/signup", response_model=MessageResponse, status_code=201)
@limiter.limit(SIGNUP_LIMIT)
async def signup(
    request: Request,
    body: SignupRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Creates the account and emails a signup OTP.
    Uses BackgroundTasks so the HTTP response is returned immediately
    without waiting for SMTP to complete.
    """
    user, code = auth_service.signup(
        db,
        email=body.email,
        password=body.password,
        account_type=body.account_type,
        tenant=getattr(request.state, "tenant", None),
    )
    background_tasks.add_task(send_otp_email, user.email, code, OTPPurpose.SIGNUP, user.name)
    return {"message": "Account created. Please check your email for the OTP to verify your account."}


@router.post("/signup/verify-otp", response_model=MessageResponse)
@limiter.limit(OTP_VERIFY_LIMIT)
async def verify_signup_otp(
    request: Request,
    body: VerifyOTPRequest,
    db: Session = Depends(get_db),
):
    auth_service.verify_signup_otp(db, email=body.email, otp=body.otp)
    return {"message": "Email verified successfully."}


# ── Signin ────────────────────────────────────────────────────────────────────

@router.post("/signin", response_model=MessageResponse)
@limiter.limit(SIGNIN_LIMIT)
async def signin(
    request: Request,
    body: SigninRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Checks credentials and emails a signin OTP. No tokens are returned here."""
    user, code = auth_service.signin(db, email=body.email, password=body.password)
    background_tasks.add_task(send_otp_email, user.email, code, OTPPurpose.SIGNIN, user.name)
    return {"message": "OTP sent to your email. Please verify to complete sign in."}


@router.post("/signin/verify-otp", response_model=TokenResponse)
@limiter.limit(OTP_VERIFY_LIMIT)
async def verify_signin_otp(
    request: Request,
    body: VerifyOTPRequest,
    db: Session = Depends(get_db),
):
    access_token, refresh_token = auth_service.verify_signin_otp(db, email=body.email, otp=body.otp)
    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}


# ── Sessions ──────────────────────────────────────────────────────────────────

@router.post("/refresh", response_model=TokenResponse)
@limiter.limit(REFRESH_LIMIT)
async def refresh(
    request: Request,
    body: RefreshTokenRequest,
    db: Session = Depends(get_db),
):
    """
    Exchange a refresh token for a new pair. The presented token is revoked,
    so each refresh token works exactly once.
    """
    access_token, refresh_token = auth_service.refresh_session(db, body.refresh_token)
    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    body: Optional[LogoutRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    With refreshToken: revokes that session only.
    Without it: revokes every session of the caller (logout everywhere).
    """
    auth_service.logout(db, current_user, body.refresh_token if body else None)
    return {"message": "Logged out successfully."}


@router.get("/profile", response_model=ProfileOut)
def get_profile(current_user: User = Depends(get_current_user)):
    return ProfileOut.from_user(current_user)
