# models/__init__.py
# Import all models here so that:
# 1. Alembic's env.py can import this single module and detect all tables.
# 2. SQLAlchemy relationship() calls resolve correctly (all classes in same metadata).

from app.models.tenant import Tenant
from app.models.city import City
from app.models.user import User, Role, Permission, role_permissions
from app.models.otp import OTPRecord
from app.models.refresh_session import RefreshSession
from app.models.kyc import KycSubmission
from app.models.service import Service, ServiceCategory
from app.models.booking import Booking
from app.models.payment import Payment
from app.models.blocklist import BlacklistedIP, BlockedEmail
from app.models.audit_log import AuditLog

__all__ = [
    "Tenant",
    "City",
    "User",
    "Role",
    "Permission",
    "role_permissions",
    "OTPRecord",
    "RefreshSession",
    "KycSubmission",
    "Service",
    "ServiceCategory",
    "Booking",
    "Payment",
    "BlacklistedIP",
    "BlockedEmail",
    "AuditLog",
]
