"""
Auth service: signup, OTP verification, signin, session minting, refresh
rotation and logout. Routers only handle HTTP; services handle logic.

Refresh sessions:
  - Every refresh JWT carries `jti` = id of its RefreshSession row, so a
    presented token maps to exactly one candidate row (no hash scan).
  - The row stores an argon2 hash of the raw JWT; the raw value is returned
    to the caller once and never persisted.
  - Rotation revokes the old row with UPDATE ... WHERE id=? AND revoked=false
    and requires exactly one affected row, so two concurrent refreshes of the
    same token cannot both succeed.
"""
import logging
import uuid
from datetime import timedelta
from typing import Optional

from jwt.exceptions import InvalidTokenError
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.config import settings
from app.core.clock import utcnow
from app.core.exceptions import (
    ConflictException, CredentialsException, InvalidOTPException, InvalidRefreshTokenException,
)
from app.core.security import (
    hash_password, verify_password, hash_token, verify_token_hash,
    create_access_token, create_refresh_token, decode_refresh_token, pwd_context,
)
from app.models.enums import AccountStatus, AccountType, OTPPurpose
from app.models.refresh_session import RefreshSession
from app.models.tenant import Tenant
from app.models.user import User
from app.services.otp_service import create_otp_record, verify_otp_record

logger = logging.getLogger(__name__)

# Pre-computed argon2 hash used ONLY for constant-time comparison when the user
# doesn't exist, so response time does not reveal which emails are registered.
# Generated once at module load. Never stored anywhere or used for real auth.
_DUMMY_HASH: str = pwd_context.hash("__dummy_timing_prevention__")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def signup(db: Session, email: str, password: str, account_type: AccountType,
           tenant: Optional[Tenant] = None) -> tuple[User, str]:
    """
    Creates the account and its signup OTP.
    Customers start ACTIVE; every other account type starts PENDING until KYC
    approval (or an admin) activates it.
    Returns (user, otp_code); the caller delivers the code.
    """
    email = email.lower()
    if get_user_by_email(db, email):
        raise ConflictException("An account with this email already exists")

    status = AccountStatus.ACTIVE if account_type == AccountType.CUSTOMER else AccountStatus.PENDING
    user = User(
        email=email,
        hashed_password=hash_password(password),
        account_type=account_type,
        account_status=status,
        tenant_id=tenant.id if tenant else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    record = create_otp_record(db, user.id, OTPPurpose.SIGNUP)
    logger.info("Signed up %s account %s (%s)", account_type.value, user.id, status.value)
    return user, record.code


def verify_signup_otp(db: Session, email: str, otp: str) -> User:
    """Consumes the signup OTP and stamps email_verified_at."""
    user = get_user_by_email(db, email)
    if not user or not verify_otp_record(db, user.id, otp, OTPPurpose.SIGNUP):
        raise InvalidOTPException()

    user.email_verified_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def signin(db: Session, email: str, password: str) -> tuple[User, str]:
    """
    Validates credentials and issues a signin OTP. No tokens are minted here.
    Returns (user, otp_code).

    Security: always use the same error message regardless of whether
    the email exists or the password is wrong (prevents user enumeration).
    """
    user = get_user_by_email(db, email)
    # Always run verify_password regardless of whether the user exists.
    # _DUMMY_HASH is a real valid argon2 hash, so passlib won't raise on it.
    password_ok = verify_password(password, user.hashed_password if user else _DUMMY_HASH)

    if not user or not password_ok:
        logger.warning("Failed signin attempt")
        raise CredentialsException("Invalid email or password")

    record = create_otp_record(db, user.id, OTPPurpose.SIGNIN)
    return user, record.code


def mint_session_tokens(db: Session, user: User) -> tuple[str, str]:
    """
    Creates a RefreshSession row and returns (access_token, refresh_token).
    The row id is chosen up front so it can be embedded as the token's jti
    before the token hash is stored.
    """
    session_id = uuid.uuid4()
    expires_at = utcnow() + timedelta(days=settings.refresh_token_expire_days)
    refresh_token = create_refresh_token(user, str(session_id), expires_at)

    db.add(RefreshSession(
        id=session_id,
        user_id=user.id,
        token_hash=hash_token(refresh_token),
        expires_at=expires_at,
    ))
    db.commit()

    logger.info("Minted session %s for user %s", session_id, user.id)
    return create_access_token(user), refresh_token


def verify_signin_otp(db: Session, email: str, otp: str) -> tuple[str, str]:
    """Consumes the signin OTP and mints a session. Returns (access_token, refresh_token)."""
    user = get_user_by_email(db, email)
    if not user or not verify_otp_record(db, user.id, otp, OTPPurpose.SIGNIN):
        raise InvalidOTPException()
    return mint_session_tokens(db, user)


def _find_refresh_session(db: Session, raw_token: str,
                          user_id: Optional[uuid.UUID] = None) -> Optional[RefreshSession]:
    """
    Resolves a raw refresh token to its live RefreshSession row, or None.
    Live = signature and exp valid, row not revoked, row not expired, stored
    hash matches. When user_id is given the row must also belong to that user.
    """
    try:
        payload = decode_refresh_token(raw_token)
        session_id = uuid.UUID(payload["jti"])
        token_user_id = uuid.UUID(payload.get("sub") or "")
    except (InvalidTokenError, ValueError):
        return None

    if user_id is not None and token_user_id != user_id:
        return None

    session = (
        db.query(RefreshSession)
        .filter(
            RefreshSession.id == session_id,
            RefreshSession.user_id == token_user_id,
            RefreshSession.revoked == False,  # noqa: E712
            RefreshSession.expires_at > utcnow(),
        )
        .first()
    )
    if not session or not verify_token_hash(raw_token, session.token_hash):
        return None
    return session


def _revoke_session(db: Session, session_id: uuid.UUID) -> bool:
    """Atomically flips one live row to revoked. False if someone got there first."""
    result = db.execute(
        update(RefreshSession)
        .where(RefreshSession.id == session_id, RefreshSession.revoked == False)  # noqa: E712
        .values(revoked=True)
    )
    return result.rowcount == 1


def refresh_session(db: Session, raw_token: str) -> tuple[str, str]:
    """
    Single-use rotation: revokes the presented session and mints a new pair
    from the freshly reloaded account. Any failure is one 401.
    """
    session = _find_refresh_session(db, raw_token)
    if session is None:
        raise InvalidRefreshTokenException()

    session_id, user_id = session.id, session.user_id
    if not _revoke_session(db, session_id):
        db.rollback()
        logger.warning("Refresh session %s was rotated concurrently", session_id)
        raise InvalidRefreshTokenException()
    # commit also expires cached state, so the user below is re-read
    db.commit()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise InvalidRefreshTokenException()

    logger.info("Rotated refresh session %s for user %s", session_id, user_id)
    return mint_session_tokens(db, user)


def logout(db: Session, user: User, raw_token: Optional[str] = None) -> int:
    """
    With a token: revokes only that session, if it is the caller's and live.
    Without one: revokes every live session of the caller.
    Returns the number of sessions revoked; an unmatched token revokes nothing.
    """
    if raw_token:
        session = _find_refresh_session(db, raw_token, user_id=user.id)
        revoked = 1 if session is not None and _revoke_session(db, session.id) else 0
    else:
        result = db.execute(
            update(RefreshSession)
            .where(RefreshSession.user_id == user.id, RefreshSession.revoked == False)  # noqa: E712
            .values(revoked=True)
        )
        revoked = result.rowcount
    db.commit()

    logger.info("Logout for user %s revoked %d session(s)", user.id, revoked)
    return revoked
