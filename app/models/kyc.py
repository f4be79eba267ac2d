import uuid
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.core.clock import utcnow
from app.models.enums import KycStatus, enum_values


class KycSubmission(Base):
    """
    Identity documents submitted by service providers.
    An approved submission activates the provider account (see admin_service.review_kyc).
    """
    __tablename__ = "kyc_submissions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type = Column(String(100), nullable=False)
    document_url = Column(String(500), nullable=False)
    status = Column(
        SAEnum(KycStatus, name="kyc_status", values_callable=enum_values),
        nullable=False,
        default=KycStatus.PENDING,
    )
    reviewed_by = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    review_notes = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    user = relationship("User", back_populates="kyc_submissions", foreign_keys=[user_id])
