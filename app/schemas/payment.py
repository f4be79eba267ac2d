from pydantic import field_validator
from typing import Optional
from datetime import datetime

from app.models.enums import PaymentStatus
from app.schemas.base import CamelModel


class PaymentOut(CamelModel):
    id: str
    booking_id: str
    amount: float
    currency: str
    status: PaymentStatus
    payment_intent_id: Optional[str] = None
    transaction_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "booking_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class PaymentIntentResponse(CamelModel):
    """
    Gateway-ready placeholder: no gateway is called, so payment_intent_id is
    whatever the payment already carries (usually null).
    """
    payment_intent_id: Optional[str] = None
    amount: float
    currency: str
    booking_id: str


class PaymentStatusUpdateRequest(CamelModel):
    status: PaymentStatus
    payment_intent_id: Optional[str] = None
    transaction_id: Optional[str] = None
