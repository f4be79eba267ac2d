"""
Booking lifecycle.

A booking and its PENDING payment are created in one commit, so a booking
never exists without a payment record. Only the two parties of a booking
(its customer and its provider) can see or change it; to anyone else it
does not exist.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.booking import Booking
from app.models.enums import BookingStatus, PaymentStatus
from app.models.payment import Payment
from app.models.service import Service
from app.models.user import User

logger = logging.getLogger(__name__)


def create_booking(db: Session, customer: User, service_id: uuid.UUID,
                   schedule: datetime, address: str) -> Booking:
    service = (
        db.query(Service)
        .filter(Service.id == service_id, Service.is_active == True)  # noqa: E712
        .first()
    )
    if not service:
        raise NotFoundException("Service")

    booking = Booking(
        service_id=service.id,
        customer_id=customer.id,
        provider_id=service.provider_id,
        schedule=schedule,
        address=address,
        city_id=service.city_id or customer.city_id,
        status=BookingStatus.PENDING,
    )
    booking.payment = Payment(
        amount=service.price,
        currency="USD",
        status=PaymentStatus.PENDING,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)

    logger.info("Booking %s created for service %s by %s", booking.id, service.id, customer.id)
    return booking


def list_bookings(db: Session, user: User, as_role: Optional[str] = None) -> list[Booking]:
    """as_role: "customer" | "provider"; None lists both sides."""
    query = db.query(Booking)
    if as_role == "customer":
        query = query.filter(Booking.customer_id == user.id)
    elif as_role == "provider":
        query = query.filter(Booking.provider_id == user.id)
    else:
        query = query.filter(or_(Booking.customer_id == user.id, Booking.provider_id == user.id))
    return query.order_by(Booking.created_at.desc()).all()


def get_booking_for_party(db: Session, user: User, booking_id: uuid.UUID) -> Booking:
    booking = (
        db.query(Booking)
        .filter(
            Booking.id == booking_id,
            or_(Booking.customer_id == user.id, Booking.provider_id == user.id),
        )
        .first()
    )
    if not booking:
        raise NotFoundException("Booking")
    return booking


def update_booking_status(db: Session, user: User, booking_id: uuid.UUID, status: BookingStatus) -> Booking:
    booking = get_booking_for_party(db, user, booking_id)
    booking.status = status
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s moved to %s by %s", booking.id, status.value, user.id)
    return booking
