import uuid
from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.enums import BookingStatus
from app.schemas.base import CamelModel, uuid_or_none
from app.schemas.payment import PaymentOut


class BookingCreateRequest(CamelModel):
    service_id: uuid.UUID
    schedule: datetime
    address: str = Field(min_length=1)


class BookingStatusUpdateRequest(CamelModel):
    status: BookingStatus


class BookingOut(CamelModel):
    id: str
    service_id: str
    customer_id: str
    provider_id: str
    schedule: datetime
    address: str
    city_id: Optional[str] = None
    status: BookingStatus
    payment: Optional[PaymentOut] = None
    created_at: datetime

    @field_validator("id", "service_id", "customer_id", "provider_id", "city_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        return uuid_or_none(v)
