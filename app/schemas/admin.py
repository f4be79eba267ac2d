import uuid
from pydantic import EmailStr, Field, IPvAnyAddress, field_validator
from typing import Optional, List
from datetime import datetime

from app.models.enums import AccountStatus
from app.schemas.base import CamelModel, uuid_or_none


class UserStatusUpdateRequest(CamelModel):
    status: AccountStatus


class RoleCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    permission_ids: List[uuid.UUID] = Field(min_length=1)


class RoleUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    permission_ids: Optional[List[uuid.UUID]] = None


class KycReviewRequest(CamelModel):
    notes: Optional[str] = None


class BlacklistIPRequest(CamelModel):
    ip_address: IPvAnyAddress
    reason: Optional[str] = None


class BlockEmailRequest(CamelModel):
    email: EmailStr
    reason: Optional[str] = None


class BlacklistedIPOut(CamelModel):
    id: str
    ip_address: str
    reason: Optional[str] = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class BlockedEmailOut(CamelModel):
    id: str
    email: str
    reason: Optional[str] = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class DashboardMetricsResponse(CamelModel):
    """Headline counts for the admin dashboard."""
    total_users: int
    active_users: int
    pending_kyc: int
    service_providers: int
    bookings: int
    tenants: int


class TenantCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    subdomain: Optional[str] = Field(default=None, max_length=100)


class TenantOut(CamelModel):
    id: str
    name: str
    subdomain: Optional[str] = None
    is_active: bool
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class AuditLogOut(CamelModel):
    id: str
    admin_id: Optional[str] = None
    action: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    details: Optional[dict] = None
    created_at: datetime

    @field_validator("id", "admin_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        return uuid_or_none(v)


class AuditLogListResponse(CamelModel):
    total: int
    page: int
    limit: int
    logs: List[AuditLogOut]
