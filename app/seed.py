"""
Seed reference data:

    python -m app.seed

Creates the four permissions, an "Admin" role holding all of them and, when
ADMIN_EMAIL and ADMIN_PASSWORD are set, an ACTIVE admin account with that
role. Safe to run repeatedly: existing rows are left as they are.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.clock import utcnow
from app.core.logger import setup_logging
from app.core.security import hash_password
from app.models.enums import AccountStatus, AccountType, PermissionName
from app.models.user import User, Role, Permission

logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "Admin"

PERMISSION_DESCRIPTIONS = {
    PermissionName.USER_READ: "View users, roles and dashboards",
    PermissionName.USER_WRITE: "Change users, roles and reference data",
    PermissionName.KYC_APPROVE: "Review KYC submissions",
    PermissionName.SYSTEM_SECURITY: "Manage IP and email blocklists",
}


def seed_permissions(db: Session) -> list[Permission]:
    existing = {p.name: p for p in db.query(Permission).all()}
    for name, description in PERMISSION_DESCRIPTIONS.items():
        if name not in existing:
            existing[name] = Permission(name=name, description=description)
            db.add(existing[name])
    db.commit()
    return list(existing.values())


def seed_admin_role(db: Session) -> Role:
    """The Admin role always ends up holding every permission."""
    permissions = seed_permissions(db)
    role = db.query(Role).filter(Role.name == ADMIN_ROLE_NAME).first()
    if role is None:
        role = Role(name=ADMIN_ROLE_NAME, description="Full access to the admin console")
        db.add(role)
    role.permissions = permissions
    db.commit()
    db.refresh(role)
    return role


def seed_admin_user(db: Session, email: str, password: str, role: Optional[Role] = None) -> User:
    role = role or seed_admin_role(db)
    email = email.lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(
            email=email,
            name="Administrator",
            hashed_password=hash_password(password),
            account_type=AccountType.ADMIN,
            account_status=AccountStatus.ACTIVE,
            role_id=role.id,
            email_verified_at=utcnow(),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created admin account %s", email)
    return user


def run(db: Session) -> None:
    role = seed_admin_role(db)
    logger.info("Admin role ready with %d permissions", len(role.permissions))
    if settings.admin_email and settings.admin_password:
        seed_admin_user(db, settings.admin_email, settings.admin_password, role)


if __name__ == "__main__":
    from app.database import SessionLocal

    setup_logging()
    session = SessionLocal()
    try:
        run(session)
    finally:
        session.close()
