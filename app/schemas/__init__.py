from app.schemas.auth import (
    SignupRequest, VerifyOTPRequest, SigninRequest,
    RefreshTokenRequest, LogoutRequest, TokenResponse, MessageResponse
)
from app.schemas.user import PermissionOut, RoleOut, UserOut, ProfileOut
from app.schemas.admin import (
    UserStatusUpdateRequest, RoleCreateRequest, RoleUpdateRequest, KycReviewRequest,
    BlacklistIPRequest, BlockEmailRequest, BlacklistedIPOut, BlockedEmailOut,
    DashboardMetricsResponse, TenantCreateRequest, TenantOut,
    AuditLogOut, AuditLogListResponse
)
from app.schemas.kyc import KycSubmitRequest, KycOut
from app.schemas.city import CityCreateRequest, CityOut
from app.schemas.service import (
    CategoryCreateRequest, CategoryOut, ServiceImage, ServiceCreateRequest, ServiceOut
)
from app.schemas.booking import BookingCreateRequest, BookingStatusUpdateRequest, BookingOut
from app.schemas.payment import PaymentOut, PaymentIntentResponse, PaymentStatusUpdateRequest
