from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.base import CamelModel


class CityCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    region: Optional[str] = Field(default=None, max_length=150)


class CityOut(CamelModel):
    id: str
    name: str
    region: Optional[str] = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)
