"""
Admin router: console operations for staff accounts.

Every endpoint:
  - Requires an ACTIVE account
  - Declares require_permissions(<route name>) (see app/core/permissions.py for the table)
  - Writes an audit log after any state-changing operation

Endpoints:
  GET   /admin/users
  PATCH /admin/users/{id}/status
  GET   /admin/permissions
  GET   /admin/roles
  POST  /admin/roles
  PATCH /admin/roles/{id}
  GET   /admin/kyc
  PATCH /admin/kyc/{id}/approve
  PATCH /admin/kyc/{id}/reject
  POST  /admin/blacklist/ip
  POST  /admin/block-email
  GET   /admin/dashboard/metrics
  GET   /admin/tenants
  POST  /admin/tenants
  POST  /admin/cities
  GET   /admin/audit-logs
"""
import uuid
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import require_active_account, require_permissions
from app.models.audit_log import AuditLog
from app.models.booking import Booking
from app.models.enums import AccountStatus, KycStatus, PROVIDER_ACCOUNT_TYPES
from app.models.kyc import KycSubmission
from app.models.tenant import Tenant
from app.models.user import User, Role, Permission
from app.schemas.admin import (
    UserStatusUpdateRequest, RoleCreateRequest, RoleUpdateRequest, KycReviewRequest,
    BlacklistIPRequest, BlockEmailRequest, BlacklistedIPOut, BlockedEmailOut,
    DashboardMetricsResponse, TenantCreateRequest, TenantOut,
    AuditLogOut, AuditLogListResponse,
)
from app.schemas.city import CityCreateRequest, CityOut
from app.schemas.kyc import KycOut
from app.schemas.user import UserOut, RoleOut, PermissionOut
from app.services import admin_service, city_service, kyc_service, tenant_service
from app.services.email_service import send_kyc_email
from app.middleware.audit_middleware import log_admin_action

router = APIRouter(dependencies=[Depends(require_active_account)])


# ── Users ─────────────────────────────────────────────────────────────────────

@router.get(
    "/users", response_model=List[UserOut],
    dependencies=[Depends(require_permissions("list_users"))],
)
def list_users(db: Session = Depends(get_db)):
    """All accounts with their roles, newest first."""
    return db.query(User).order_by(User.created_at.desc()).all()


@router.patch(
    "/users/{user_id}/status", response_model=UserOut,
    dependencies=[Depends(require_permissions("update_user_status"))],
)
def update_user_status(
    user_id: uuid.UUID,
    body: UserStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    return admin_service.update_user_status(db, admin, user_id, body.status)


# ── Roles & permissions ───────────────────────────────────────────────────────

@router.get(
    "/permissions", response_model=List[PermissionOut],
    dependencies=[Depends(require_permissions("list_permissions"))],
)
def list_permissions(db: Session = Depends(get_db)):
    return db.query(Permission).order_by(Permission.name).all()


@router.get(
    "/roles", response_model=List[RoleOut],
    dependencies=[Depends(require_permissions("list_roles"))],
)
def list_roles(db: Session = Depends(get_db)):
    return db.query(Role).order_by(Role.name).all()


@router.post(
    "/roles", response_model=RoleOut, status_code=201,
    dependencies=[Depends(require_permissions("create_role"))],
)
def create_role(
    body: RoleCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    return admin_service.create_role(
        db, admin, name=body.name, permission_ids=body.permission_ids, description=body.description,
    )


@router.patch(
    "/roles/{role_id}", response_model=RoleOut,
    dependencies=[Depends(require_permissions("update_role"))],
)
def update_role(
    role_id: uuid.UUID,
    body: RoleUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    return admin_service.update_role(
        db, admin, role_id,
        name=body.name, description=body.description, permission_ids=body.permission_ids,
    )


# ── KYC review ────────────────────────────────────────────────────────────────

@router.get(
    "/kyc", response_model=List[KycOut],
    dependencies=[Depends(require_permissions("list_kyc_submissions"))],
)
def list_kyc_submissions(db: Session = Depends(get_db)):
    return kyc_service.list_submissions(db)


@router.patch(
    "/kyc/{kyc_id}/approve", response_model=KycOut,
    dependencies=[Depends(require_permissions("approve_kyc"))],
)
def approve_kyc(
    kyc_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    body: Optional[KycReviewRequest] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    """Approves the submission and activates the submitting account."""
    notes = body.notes if body else None
    submission = admin_service.review_kyc(db, admin, kyc_id, approve=True, notes=notes)
    background_tasks.add_task(send_kyc_email, submission.user.email, "approved", notes)
    return submission


@router.patch(
    "/kyc/{kyc_id}/reject", response_model=KycOut,
    dependencies=[Depends(require_permissions("reject_kyc"))],
)
def reject_kyc(
    kyc_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    body: Optional[KycReviewRequest] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    notes = body.notes if body else None
    submission = admin_service.review_kyc(db, admin, kyc_id, approve=False, notes=notes)
    background_tasks.add_task(send_kyc_email, submission.user.email, "rejected", notes)
    return submission


# ── Security ──────────────────────────────────────────────────────────────────

@router.post(
    "/blacklist/ip", response_model=BlacklistedIPOut, status_code=201,
    dependencies=[Depends(require_permissions("blacklist_ip"))],
)
def blacklist_ip(
    body: BlacklistIPRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    return admin_service.blacklist_ip(db, admin, str(body.ip_address), body.reason)


@router.post(
    "/block-email", response_model=BlockedEmailOut, status_code=201,
    dependencies=[Depends(require_permissions("block_email"))],
)
def block_email(
    body: BlockEmailRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    return admin_service.block_email(db, admin, body.email, body.reason)


# ── Dashboard ─────────────────────────────────────────────────────────────────

@router.get(
    "/dashboard/metrics", response_model=DashboardMetricsResponse,
    dependencies=[Depends(require_permissions("get_dashboard_metrics"))],
)
def get_dashboard_metrics(db: Session = Depends(get_db)):
    """Headline counts for the admin dashboard."""
    return DashboardMetricsResponse(
        total_users=db.query(User).count(),
        active_users=db.query(User).filter(User.account_status == AccountStatus.ACTIVE).count(),
        pending_kyc=db.query(KycSubmission).filter(KycSubmission.status == KycStatus.PENDING).count(),
        service_providers=db.query(User).filter(User.account_type.in_(PROVIDER_ACCOUNT_TYPES)).count(),
        bookings=db.query(Booking).count(),
        tenants=db.query(Tenant).count(),
    )


# ── Tenants & cities ──────────────────────────────────────────────────────────

@router.get(
    "/tenants", response_model=List[TenantOut],
    dependencies=[Depends(require_permissions("list_tenants"))],
)
def list_tenants(db: Session = Depends(get_db)):
    return tenant_service.list_tenants(db)


@router.post(
    "/tenants", response_model=TenantOut, status_code=201,
    dependencies=[Depends(require_permissions("create_tenant"))],
)
def create_tenant(
    body: TenantCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    tenant = tenant_service.create_tenant(db, name=body.name, subdomain=body.subdomain)
    log_admin_action(
        db, admin_id=admin.id, action="CREATE_TENANT",
        target_type="tenant", target_id=str(tenant.id),
        details={"name": tenant.name, "subdomain": tenant.subdomain},
    )
    return tenant


@router.post(
    "/cities", response_model=CityOut, status_code=201,
    dependencies=[Depends(require_permissions("create_city"))],
)
def create_city(
    body: CityCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    city = city_service.create_city(db, name=body.name, region=body.region)
    log_admin_action(
        db, admin_id=admin.id, action="CREATE_CITY",
        target_type="city", target_id=str(city.id),
        details={"name": city.name, "region": city.region},
    )
    return city


# ── Audit Logs ────────────────────────────────────────────────────────────────

@router.get(
    "/audit-logs", response_model=AuditLogListResponse,
    dependencies=[Depends(require_permissions("get_audit_logs"))],
)
def get_audit_logs(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: Optional[str] = Query(None, description="Filter by action type"),
    target_type: Optional[str] = Query(None, alias="targetType", description="Filter by target type"),
):
    """
    Read-only audit log. Newest entries first.
    Can be filtered by action type (e.g., 'APPROVE_KYC') or target type (e.g., 'user').
    """
    query = db.query(AuditLog)

    if action:
        query = query.filter(AuditLog.action == action.upper())
    if target_type:
        query = query.filter(AuditLog.target_type == target_type.lower())

    total = query.count()
    logs = (
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return AuditLogListResponse(
        total=total,
        page=page,
        limit=limit,
        logs=[AuditLogOut.model_validate(log) for log in logs],
    )
