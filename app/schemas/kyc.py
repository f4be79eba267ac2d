from pydantic import Field, HttpUrl, field_validator
from typing import Optional
from datetime import datetime

from app.models.enums import KycStatus
from app.schemas.base import CamelModel, uuid_or_none


class KycSubmitRequest(CamelModel):
    document_type: str = Field(min_length=1, max_length=100)
    document_url: HttpUrl


class KycOut(CamelModel):
    id: str
    user_id: str
    document_type: str
    document_url: str
    status: KycStatus
    reviewed_by: Optional[str] = None
    review_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "user_id", "reviewed_by", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        return uuid_or_none(v)
