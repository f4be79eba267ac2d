import uuid
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import require_active_account
from app.models.user import User
from app.schemas.booking import BookingCreateRequest, BookingStatusUpdateRequest, BookingOut
from app.services import booking_service

router = APIRouter()


@router.post("", response_model=BookingOut, status_code=201)
def create_booking(
    body: BookingCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
):
    """Creates the booking together with a PENDING payment for the listing price."""
    return booking_service.create_booking(
        db, current_user, service_id=body.service_id, schedule=body.schedule, address=body.address,
    )


@router.get("", response_model=List[BookingOut])
def list_bookings(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
    as_role: Optional[Literal["customer", "provider"]] = Query(None, alias="type"),
):
    return booking_service.list_bookings(db, current_user, as_role)


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(
    booking_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
):
    return booking_service.get_booking_for_party(db, current_user, booking_id)


@router.patch("/{booking_id}/status", response_model=BookingOut)
def update_booking_status(
    booking_id: uuid.UUID,
    body: BookingStatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
):
    return booking_service.update_booking_status(db, current_user, booking_id, body.status)
