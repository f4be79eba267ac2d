"""
FastAPI dependencies used across routers.
Only auth/DB dependencies go here.
Business logic belongs in services/.
"""
import uuid

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jwt.exceptions import InvalidTokenError

from app.config import settings
from app.database import get_db
from app.core.security import decode_access_token
from app.core.exceptions import CredentialsException, ForbiddenException, AccountStatusException
from app.core.permissions import required_permissions, has_any_permission
from app.models.enums import AccountStatus, AccountType
from app.models.user import User

# tokenUrl is informational for the OpenAPI docs; tokens come from signin/verify-otp
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/signin/verify-otp")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validates the JWT access token and returns the authenticated User.

    Checks performed (in order):
    1. Token is a valid JWT signed with our secret key
    2. Token type is 'access' (not refresh)
    3. 'sub' claim exists and maps to a real user

    Account status is NOT checked here; see require_active_account.
    """
    try:
        payload = decode_access_token(token)
        user_id = uuid.UUID(payload.get("sub") or "")
    except (InvalidTokenError, ValueError):
        raise CredentialsException()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise CredentialsException()
    return user


def require_account_status(*allowed: AccountStatus):
    """Build a dependency that admits only accounts in one of the given statuses."""
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.account_status not in allowed:
            raise AccountStatusException(current_user.account_status.value)
        return current_user
    return dependency


require_active_account = require_account_status(AccountStatus.ACTIVE)


def require_account_types(*account_types: AccountType):
    """Build a dependency that admits only the listed account types."""
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.account_type not in account_types:
            raise ForbiddenException("This action is not allowed for your account type")
        return current_user
    return dependency


def require_permissions(route_name: str):
    """
    Build a dependency that checks the caller's role against
    ROUTE_PERMISSIONS[route_name]. A name missing from the table denies everyone.
    """
    required = required_permissions(route_name)

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_any_permission(current_user.permission_names, required):
            raise ForbiddenException()
        return current_user

    dependency.route_name = route_name
    return dependency
