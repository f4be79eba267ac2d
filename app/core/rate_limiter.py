"""
slowapi rate limiter, keyed by the peer address of the connection.

IMPORTANT: Every rate-limited endpoint MUST have `request: Request` as a parameter
(slowapi needs it to extract the client IP). The @limiter.limit decorator must be
placed BELOW the @router.xxx decorator, not above it.

OTP verification has no per-code attempt counter, so these limits are the
only brake on guessing codes. The key never comes from request headers such as
X-Forwarded-For, which the caller controls. Set RATE_LIMIT_ENABLED=false to
switch the limits off.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

SIGNUP_LIMIT = "5/minute"
SIGNIN_LIMIT = "10/minute"
OTP_VERIFY_LIMIT = "10/minute"
REFRESH_LIMIT = "20/minute"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200/minute"],
    enabled=settings.rate_limit_enabled,
)
