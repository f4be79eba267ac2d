import uuid
from sqlalchemy import Boolean, Column, String, Text, Numeric, TIMESTAMP, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func
from app.database import Base
from app.core.clock import utcnow


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    services = relationship("Service", back_populates="category")


class Service(Base):
    """A service listing offered by a provider account."""
    __tablename__ = "services"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    title = Column(String(200), nullable=False)
    category_id = Column(
        UUID(as_uuid=True),
        ForeignKey("service_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    provider_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    # [{"url": ..., "alt": ..., "order": ..., "caption": ...}, ...]
    images = Column(JSON, nullable=True)
    city_id = Column(UUID(as_uuid=True), ForeignKey("cities.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    category = relationship("ServiceCategory", back_populates="services")
    provider = relationship("User", back_populates="services")
    city = relationship("City", back_populates="services")
    bookings = relationship("Booking", back_populates="service")
