import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import require_active_account
from app.models.user import User
from app.schemas.payment import PaymentOut, PaymentIntentResponse, PaymentStatusUpdateRequest
from app.services import payment_service

router = APIRouter()


@router.get("/booking/{booking_id}", response_model=PaymentOut)
def get_booking_payment(
    booking_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
):
    return payment_service.get_payment_for_booking(db, current_user, booking_id)


@router.post("/booking/{booking_id}/intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    booking_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
):
    """Gateway-ready placeholder: reports what would be charged, calls no gateway."""
    return payment_service.create_payment_intent(db, current_user, booking_id)


@router.patch("/{payment_id}/status", response_model=PaymentOut)
def update_payment_status(
    payment_id: uuid.UUID,
    body: PaymentStatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_account),
):
    return payment_service.update_payment_status(
        db, current_user, payment_id, body.status,
        payment_intent_id=body.payment_intent_id,
        transaction_id=body.transaction_id,
    )
