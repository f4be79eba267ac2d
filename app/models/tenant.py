import uuid
from sqlalchemy import Boolean, Column, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func
from app.database import Base
from app.core.clock import utcnow


class Tenant(Base):
    """
    A marketplace tenant. Requests are attributed to a tenant either by the
    X-Tenant-ID header or by the subdomain of the Host header.
    """
    __tablename__ = "tenants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(150), unique=True, nullable=False)
    subdomain = Column(String(100), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    users = relationship("User", back_populates="tenant")
