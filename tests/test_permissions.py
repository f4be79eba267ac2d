"""
Route permission table and the account status / type guards.
"""
import pytest

from app.core.exceptions import ForbiddenException
from app.core.security import create_access_token, hash_password
from app.core.dependencies import require_permissions
from app.core.permissions import ROUTE_PERMISSIONS, has_any_permission, required_permissions
from app.routers import admin, services
from app.models.enums import AccountStatus, AccountType, PermissionName
from app.models.user import User, Role, Permission
from app.seed import seed_permissions
from tests.conftest import API


def test_unlisted_route_names_grant_nothing():
    assert required_permissions("search_services") == frozenset()
    assert has_any_permission(["USER_READ", "USER_WRITE"], frozenset()) is False


def test_any_listed_permission_is_enough():
    required = frozenset({PermissionName.USER_READ, PermissionName.KYC_APPROVE})
    assert has_any_permission(["KYC_APPROVE"], required) is True
    assert has_any_permission(["SYSTEM_SECURITY"], required) is False


def _guarded_route_names(route):
    return {getattr(d.dependency, "route_name", None) for d in route.dependencies} - {None}


def test_every_admin_route_declares_its_table_entry():
    for route in admin.router.routes:
        assert _guarded_route_names(route) == {route.name}, route.path
        assert route.name in ROUTE_PERMISSIONS, route.path


def test_every_table_entry_names_a_guarded_route():
    guarded = set()
    for route in admin.router.routes + services.router.routes:
        guarded |= _guarded_route_names(route)
    assert guarded == set(ROUTE_PERMISSIONS)


def test_unknown_route_name_denies_everyone(db):
    everything = list(PermissionName)
    _user_with_permissions(db, "root@servease.com", everything)
    user = db.query(User).filter(User.email == "root@servease.com").one()

    guard = require_permissions("not_in_the_table")
    with pytest.raises(ForbiddenException):
        guard(current_user=user)
    assert require_permissions("list_users")(current_user=user) is user


def _user_with_permissions(db, email, names, status=AccountStatus.ACTIVE):
    seed_permissions(db)
    role = Role(name=f"role-{email}")
    role.permissions = db.query(Permission).filter(Permission.name.in_(names)).all()
    user = User(
        email=email,
        hashed_password=hash_password("password123"),
        account_type=AccountType.ADMIN,
        account_status=status,
        role=role,
    )
    db.add(user)
    db.commit()
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def test_permission_granted(client, db):
    headers = _user_with_permissions(db, "reader@servease.com", [PermissionName.USER_READ])
    assert client.get(f"{API}/admin/users", headers=headers).status_code == 200


def test_permission_missing_is_403(client, db):
    headers = _user_with_permissions(db, "kyc@servease.com", [PermissionName.KYC_APPROVE])
    assert client.get(f"{API}/admin/users", headers=headers).status_code == 403
    assert client.get(f"{API}/admin/kyc", headers=headers).status_code == 200


def test_inactive_account_is_403_even_with_permission(client, db):
    headers = _user_with_permissions(
        db, "suspended@servease.com", [PermissionName.USER_READ], status=AccountStatus.SUSPENDED,
    )
    response = client.get(f"{API}/admin/users", headers=headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Account is SUSPENDED. Please contact support."


def test_admin_routes_require_bearer(client):
    assert client.get(f"{API}/admin/users").status_code == 401
