import uuid
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.core.clock import utcnow


class AuditLog(Base):
    """
    Immutable audit trail for admin actions.
    Records are INSERT-only, never updated or deleted.

    Examples of actions recorded:
      UPDATE_USER_STATUS, CREATE_ROLE, UPDATE_ROLE, APPROVE_KYC, REJECT_KYC,
      BLACKLIST_IP, BLOCK_EMAIL, CREATE_TENANT, CREATE_CITY, CREATE_CATEGORY
    """
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    admin_id = Column(
        UUID(as_uuid=True),
        # SET NULL: preserve log even if admin account is deleted
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action = Column(String(100), nullable=False, index=True)
    # What kind of entity was affected: "user", "role", "kyc", "ip", "email", ...
    target_type = Column(String(50), nullable=True)
    target_id = Column(String(100), nullable=True, index=True)
    details = Column(JSON, nullable=True)
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    # ── Relationships ──────────────────────────────────────────────────────────
    admin = relationship("User", foreign_keys=[admin_id])
