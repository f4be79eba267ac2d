import uuid
from sqlalchemy import Boolean, Column, String, TIMESTAMP, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func
from app.database import Base
from app.models.enums import OTPPurpose, enum_values
from app.core.clock import utcnow


class OTPRecord(Base):
    """
    One-time passcodes for signup verification and signin.

    - Records are never deleted; a used or superseded code keeps is_used=True.
    - Issuing a new code for a user+purpose marks older unused codes as used,
      so only the newest outstanding code can ever verify.
    - Expiry is checked at verification time against expires_at.
    """
    __tablename__ = "otp_records"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code = Column(String(6), nullable=False)
    purpose = Column(
        SAEnum(OTPPurpose, name="otp_purpose", values_callable=enum_values),
        nullable=False,
    )
    is_used = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    # ── Relationships ──────────────────────────────────────────────────────────
    user = relationship("User", back_populates="otp_records")
