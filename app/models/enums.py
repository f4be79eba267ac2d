"""
Enumerations shared by models, schemas and services.
Values are the strings stored in the database and exchanged over the API.
"""
import enum


class AccountType(str, enum.Enum):
    CUSTOMER = "customer"
    SERVICE_PROVIDER_INDEPENDENT = "service-provider-independent"
    SERVICE_PROVIDER_BUSINESS = "service-provider-business"
    ADMIN = "admin"


PROVIDER_ACCOUNT_TYPES = (
    AccountType.SERVICE_PROVIDER_INDEPENDENT,
    AccountType.SERVICE_PROVIDER_BUSINESS,
)


class AccountStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"
    BLOCKED = "BLOCKED"
    BLACKLISTED = "BLACKLISTED"


class PermissionName(str, enum.Enum):
    USER_READ = "USER_READ"
    USER_WRITE = "USER_WRITE"
    KYC_APPROVE = "KYC_APPROVE"
    SYSTEM_SECURITY = "SYSTEM_SECURITY"


class OTPPurpose(str, enum.Enum):
    SIGNUP = "signup"
    SIGNIN = "signin"


class KycStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


def enum_values(enum_cls) -> list[str]:
    """Persist enum .value strings rather than member names."""
    return [member.value for member in enum_cls]
