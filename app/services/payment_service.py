"""
Payment status tracking. No gateway is integrated: the intent endpoint
returns the amount to charge and whatever intent id the payment already has.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.booking import Booking
from app.models.enums import PaymentStatus
from app.models.payment import Payment
from app.models.user import User
from app.services.booking_service import get_booking_for_party

logger = logging.getLogger(__name__)


def get_payment_for_booking(db: Session, user: User, booking_id: uuid.UUID) -> Payment:
    booking = get_booking_for_party(db, user, booking_id)
    if booking.payment is None:
        raise NotFoundException("Payment")
    return booking.payment


def create_payment_intent(db: Session, user: User, booking_id: uuid.UUID) -> dict:
    payment = get_payment_for_booking(db, user, booking_id)
    return {
        "payment_intent_id": payment.payment_intent_id,
        "amount": payment.amount,
        "currency": payment.currency,
        "booking_id": str(payment.booking_id),
    }


def update_payment_status(db: Session, user: User, payment_id: uuid.UUID, status: PaymentStatus,
                          payment_intent_id: Optional[str] = None,
                          transaction_id: Optional[str] = None) -> Payment:
    payment = (
        db.query(Payment)
        .join(Payment.booking)
        .filter(
            Payment.id == payment_id,
            or_(Booking.customer_id == user.id, Booking.provider_id == user.id),
        )
        .first()
    )
    if not payment:
        raise NotFoundException("Payment")

    payment.status = status
    if payment_intent_id is not None:
        payment.payment_intent_id = payment_intent_id
    if transaction_id is not None:
        payment.transaction_id = transaction_id
    db.commit()
    db.refresh(payment)

    logger.info("Payment %s moved to %s by %s", payment.id, status.value, user.id)
    return payment
