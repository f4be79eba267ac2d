"""
Security utilities: password/secret hashing and JWT token management.
Uses PyJWT (not python-jose) for tokens and passlib's argon2 handler for hashing.
"""
import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext
from datetime import timedelta
from app.config import settings
from app.core.clock import utcnow

# ── Hashing ───────────────────────────────────────────────────────────────────
# argon2 is memory-hard; used for passwords and for stored refresh tokens.
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_token(raw_token: str) -> str:
    return pwd_context.hash(raw_token)


def verify_token_hash(raw_token: str, token_hash: str) -> bool:
    return pwd_context.verify(raw_token, token_hash)


# ── JWT Token Creation ────────────────────────────────────────────────────────

def _identity_claims(user) -> dict:
    return {
        "sub": str(user.id),
        "email": user.email,
        "accountType": user.account_type.value,
        "accountStatus": user.account_status.value,
    }


def create_access_token(user) -> str:
    """
    Short-lived access token (default 15 min) carrying the account's
    identity claims. Status is re-read from the DB on every request anyway,
    the claim is informational for clients.
    """
    now = utcnow()
    payload = {
        **_identity_claims(user),
        "type": "access",
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_refresh_token(user, session_id: str, expires_at) -> str:
    """
    Long-lived refresh token (default 7 days).
    `jti` is the id of the RefreshSession row that stores this token's hash.
    """
    payload = {
        **_identity_claims(user),
        "type": "refresh",
        "jti": session_id,
        "iat": utcnow(),
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """
    Decodes and validates an access token.
    Raises jwt.exceptions.InvalidTokenError (or subclass) on any failure.
    The caller is responsible for converting this into an HTTPException.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    if payload.get("type") != "access":
        raise InvalidTokenError("Not an access token")
    return payload


def decode_refresh_token(token: str) -> dict:
    """
    Decodes and validates a refresh token.
    Raises jwt.exceptions.InvalidTokenError on failure.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    if payload.get("type") != "refresh" or not payload.get("jti"):
        raise InvalidTokenError("Not a refresh token")
    return payload
