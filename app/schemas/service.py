"""
Service listing schemas.

images is a list of {url, alt, order, caption} objects stored as JSON on the listing.
"""
import uuid
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.schemas.base import CamelModel, uuid_or_none


class CategoryCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)


class CategoryOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class ServiceImage(CamelModel):
    url: str = Field(min_length=1)
    alt: Optional[str] = None
    order: Optional[int] = None
    caption: Optional[str] = None


class ServiceCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    category_id: uuid.UUID
    price: float = Field(ge=0)
    description: Optional[str] = None
    images: Optional[List[ServiceImage]] = None


class ServiceOut(CamelModel):
    id: str
    title: str
    category_id: str
    provider_id: str
    price: float
    description: Optional[str] = None
    images: Optional[List[ServiceImage]] = None
    city_id: Optional[str] = None
    is_active: bool
    category: Optional[CategoryOut] = None
    created_at: datetime

    @field_validator("id", "category_id", "provider_id", "city_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        return uuid_or_none(v)
