import uuid
from sqlalchemy import Boolean, Column, String, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func
from app.database import Base
from app.core.clock import utcnow


class RefreshSession(Base):
    """
    Server-side record of an issued refresh token.

    - id is embedded in the refresh JWT as its `jti` claim, so a presented
      token resolves to exactly one candidate row.
    - token_hash is an argon2 hash of the raw token; the raw value is never stored.
    - A row moves active → revoked exactly once (logout or rotation).
      Expiry is not a transition; expires_at is checked at use time.
    """
    __tablename__ = "refresh_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash = Column(String, nullable=False)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    revoked = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────────
    user = relationship("User", back_populates="refresh_sessions")
