"""
OTP service: generation, storage and verification.

Design decisions:
  1. Codes are 6 decimal digits drawn with secrets.randbelow (CSPRNG).
  2. A new code for the same user+purpose invalidates all previous unused
     codes, so at most one outstanding code is ever trusted.
  3. Codes expire after settings.otp_expiry_minutes (default 5).
  4. Verification consumes the code: a second attempt with it fails.
  5. There is no per-code attempt counter; slowapi limits the HTTP endpoints.
"""
import logging
import secrets
from datetime import timedelta
from sqlalchemy.orm import Session

from app.config import settings
from app.core.clock import utcnow
from app.models.enums import OTPPurpose
from app.models.otp import OTPRecord

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    """
    secrets.randbelow(900000) gives 0–899999, +100000 gives 100000–999999.
    """
    return str(secrets.randbelow(900000) + 100000)


def create_otp_record(db: Session, user_id, purpose: OTPPurpose) -> OTPRecord:
    """
    Invalidates older unused codes for user+purpose, stores a fresh one and
    commits. The caller hands record.code to the email service.
    """
    db.query(OTPRecord).filter(
        OTPRecord.user_id == user_id,
        OTPRecord.purpose == purpose,
        OTPRecord.is_used == False,  # noqa: E712
    ).update({"is_used": True}, synchronize_session=False)

    record = OTPRecord(
        user_id=user_id,
        code=generate_otp(),
        purpose=purpose,
        expires_at=utcnow() + timedelta(minutes=settings.otp_expiry_minutes),
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info("Issued %s OTP for user %s", purpose.value, user_id)
    return record


def verify_otp_record(db: Session, user_id, code: str, purpose: OTPPurpose) -> bool:
    """
    Returns True and marks the code used when the newest unused, unexpired
    record for (user, code, purpose) exists. Returns False otherwise.
    """
    record = (
        db.query(OTPRecord)
        .filter(
            OTPRecord.user_id == user_id,
            OTPRecord.code == code,
            OTPRecord.purpose == purpose,
            OTPRecord.is_used == False,  # noqa: E712
            OTPRecord.expires_at > utcnow(),
        )
        .order_by(OTPRecord.created_at.desc())
        .first()
    )

    if not record:
        logger.warning("Rejected %s OTP for user %s", purpose.value, user_id)
        return False

    record.is_used = True
    db.commit()
    return True
