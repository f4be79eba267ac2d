import uuid
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Table, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.core.clock import utcnow
from app.models.enums import AccountType, AccountStatus, PermissionName, enum_values


role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", UUID(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", UUID(as_uuid=True), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(Base):
    __tablename__ = "permissions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(
        SAEnum(PermissionName, name="permission_name", values_callable=enum_values),
        unique=True,
        nullable=False,
    )
    description = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())


class Role(Base):
    __tablename__ = "roles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    permissions = relationship("Permission", secondary=role_permissions, lazy="selectin")
    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(150), nullable=True)
    hashed_password = Column(String, nullable=False)
    account_type = Column(
        SAEnum(AccountType, name="account_type", values_callable=enum_values),
        nullable=False,
    )
    # Gates most protected endpoints; see require_active_account
    account_status = Column(
        SAEnum(AccountStatus, name="account_status", values_callable=enum_values),
        nullable=False,
        default=AccountStatus.PENDING,
    )
    role_id = Column(UUID(as_uuid=True), ForeignKey("roles.id", ondelete="SET NULL"), nullable=True, index=True)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True)
    city_id = Column(UUID(as_uuid=True), ForeignKey("cities.id", ondelete="SET NULL"), nullable=True, index=True)

    # Timestamps
    email_verified_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    role = relationship("Role", back_populates="users")
    tenant = relationship("Tenant", back_populates="users")
    city = relationship("City", back_populates="users")
    otp_records = relationship("OTPRecord", back_populates="user", cascade="all, delete-orphan")
    refresh_sessions = relationship("RefreshSession", back_populates="user", cascade="all, delete-orphan")
    kyc_submissions = relationship(
        "KycSubmission",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="[KycSubmission.user_id]",
    )
    services = relationship("Service", back_populates="provider")

    @property
    def permission_names(self) -> list[str]:
        if not self.role:
            return []
        return [p.name.value for p in self.role.permissions]
