import uuid
from sqlalchemy import Column, String, Numeric, TIMESTAMP, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.core.clock import utcnow
from app.models.enums import PaymentStatus, enum_values


class Payment(Base):
    """
    Payment status for a booking. Created PENDING alongside the booking;
    later transitions are reported by whoever settles the payment.
    """
    __tablename__ = "payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    booking_id = Column(
        UUID(as_uuid=True),
        ForeignKey("bookings.id", ondelete="CASCADE"),
        unique=True,  # one payment per booking
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD", server_default="USD")
    status = Column(
        SAEnum(PaymentStatus, name="payment_status", values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    payment_intent_id = Column(String(150), nullable=True)
    transaction_id = Column(String(150), nullable=True, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    booking = relationship("Booking", back_populates="payment")
