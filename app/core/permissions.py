"""
Declarative route → permission table.

Keys are route names (the endpoint function name FastAPI gives each route).
A caller passes when their role grants ANY of the listed permissions.
Routes guarded by require_permissions but missing from the table deny
everyone.
"""
from app.models.enums import PermissionName

ROUTE_PERMISSIONS: dict[str, frozenset[PermissionName]] = {
    # ── Users & roles ─────────────────────────────────────────────────────────
    "list_users": frozenset({PermissionName.USER_READ}),
    "update_user_status": frozenset({PermissionName.USER_WRITE}),
    "list_permissions": frozenset({PermissionName.USER_READ}),
    "list_roles": frozenset({PermissionName.USER_READ}),
    "create_role": frozenset({PermissionName.USER_WRITE}),
    "update_role": frozenset({PermissionName.USER_WRITE}),
    "get_dashboard_metrics": frozenset({PermissionName.USER_READ}),
    "get_audit_logs": frozenset({PermissionName.USER_READ}),
    # ── KYC review ────────────────────────────────────────────────────────────
    "list_kyc_submissions": frozenset({PermissionName.KYC_APPROVE}),
    "approve_kyc": frozenset({PermissionName.KYC_APPROVE}),
    "reject_kyc": frozenset({PermissionName.KYC_APPROVE}),
    # ── Security ──────────────────────────────────────────────────────────────
    "blacklist_ip": frozenset({PermissionName.SYSTEM_SECURITY}),
    "block_email": frozenset({PermissionName.SYSTEM_SECURITY}),
    # ── Reference data ────────────────────────────────────────────────────────
    "list_tenants": frozenset({PermissionName.USER_READ}),
    "create_tenant": frozenset({PermissionName.USER_WRITE}),
    "create_city": frozenset({PermissionName.USER_WRITE}),
    "create_category": frozenset({PermissionName.USER_WRITE}),
}


def required_permissions(route_name: str) -> frozenset[PermissionName]:
    return ROUTE_PERMISSIONS.get(route_name, frozenset())


def has_any_permission(granted: list[str], required: frozenset[PermissionName]) -> bool:
    """True when at least one required permission is granted. Nothing required grants nothing."""
    return any(permission.value in granted for permission in required)
