"""
User schemas: identity views returned by /auth/profile and the admin console.
"""
from pydantic import field_validator
from typing import Optional, List
from datetime import datetime

from app.models.enums import AccountType, AccountStatus, PermissionName
from app.schemas.base import CamelModel, uuid_or_none


class PermissionOut(CamelModel):
    id: str
    name: PermissionName
    description: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class RoleOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    permissions: List[PermissionOut] = []

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class UserOut(CamelModel):
    """
    Admin-facing user representation.
    hashed_password is never included; Pydantic only exposes fields declared here.
    """
    id: str
    email: str
    name: Optional[str] = None
    account_type: AccountType
    account_status: AccountStatus
    role: Optional[RoleOut] = None
    tenant_id: Optional[str] = None
    city_id: Optional[str] = None
    email_verified_at: Optional[datetime] = None
    created_at: datetime

    @field_validator("id", "tenant_id", "city_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        return uuid_or_none(v)


class ProfileOut(CamelModel):
    """The caller's own identity, as returned by GET /auth/profile."""
    id: str
    email: str
    name: Optional[str] = None
    account_type: AccountType
    account_status: AccountStatus
    tenant_id: Optional[str] = None
    city_id: Optional[str] = None
    role: Optional[str] = None
    permissions: List[str] = []
    email_verified_at: Optional[datetime] = None

    @field_validator("id", "tenant_id", "city_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        return uuid_or_none(v)

    @classmethod
    def from_user(cls, user) -> "ProfileOut":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            account_type=user.account_type,
            account_status=user.account_status,
            tenant_id=user.tenant_id,
            city_id=user.city_id,
            role=user.role.name if user.role else None,
            permissions=user.permission_names,
            email_verified_at=user.email_verified_at,
        )
