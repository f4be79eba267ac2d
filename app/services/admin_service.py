"""
Admin service: user status, roles, KYC review and the IP/email blocklists.
Every function here that changes state writes an audit record.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, ForbiddenException, NotFoundException, BadRequestException
from app.middleware.audit_middleware import log_admin_action
from app.models.blocklist import BlacklistedIP, BlockedEmail
from app.models.enums import AccountStatus, KycStatus
from app.models.kyc import KycSubmission
from app.models.user import User, Role, Permission

logger = logging.getLogger(__name__)


# ── Users ─────────────────────────────────────────────────────────────────────

def update_user_status(db: Session, admin: User, user_id: uuid.UUID, new_status: AccountStatus) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundException("User")

    previous = user.account_status
    user.account_status = new_status
    db.commit()
    db.refresh(user)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_USER_STATUS",
        target_type="user", target_id=str(user.id),
        details={"from": previous.value, "to": new_status.value},
    )
    return user


# ── Roles ─────────────────────────────────────────────────────────────────────

def _load_permissions(db: Session, permission_ids: list[uuid.UUID]) -> list[Permission]:
    unique_ids = set(permission_ids)
    permissions = db.query(Permission).filter(Permission.id.in_(unique_ids)).all()
    if len(permissions) != len(unique_ids):
        raise BadRequestException("One or more permissions do not exist")
    return permissions


def create_role(db: Session, admin: User, name: str, permission_ids: list[uuid.UUID],
                description: Optional[str] = None) -> Role:
    if db.query(Role).filter(Role.name == name).first():
        raise ConflictException("Role already exists")

    role = Role(name=name, description=description)
    role.permissions = _load_permissions(db, permission_ids)
    db.add(role)
    db.commit()
    db.refresh(role)

    log_admin_action(
        db, admin_id=admin.id, action="CREATE_ROLE",
        target_type="role", target_id=str(role.id),
        details={"name": role.name, "permissions": [p.name.value for p in role.permissions]},
    )
    return role


def update_role(db: Session, admin: User, role_id: uuid.UUID, name: Optional[str] = None,
                description: Optional[str] = None,
                permission_ids: Optional[list[uuid.UUID]] = None) -> Role:
    """Only the fields that are given change; an explicit permission list replaces the old one."""
    role = db.query(Role).filter(Role.id == role_id).first()
    if not role:
        raise NotFoundException("Role")

    changes = {}
    if name is not None and name != role.name:
        if db.query(Role).filter(Role.name == name, Role.id != role_id).first():
            raise ConflictException("Role already exists")
        changes["name"] = name
        role.name = name
    if description is not None:
        role.description = description
    if permission_ids is not None:
        role.permissions = _load_permissions(db, permission_ids)
        changes["permissions"] = [p.name.value for p in role.permissions]

    db.commit()
    db.refresh(role)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_ROLE",
        target_type="role", target_id=str(role.id),
        details=changes,
    )
    return role


# ── KYC review ────────────────────────────────────────────────────────────────

def review_kyc(db: Session, admin: User, kyc_id: uuid.UUID, approve: bool,
               notes: Optional[str] = None) -> KycSubmission:
    """
    Records the decision on a submission. Approval also activates the
    submitting account; rejection leaves its status alone.
    The caller sends the notification email.
    """
    submission = db.query(KycSubmission).filter(KycSubmission.id == kyc_id).first()
    if not submission:
        raise NotFoundException("KYC submission")

    submission.status = KycStatus.APPROVED if approve else KycStatus.REJECTED
    submission.reviewed_by = admin.id
    submission.review_notes = notes
    if approve:
        submission.user.account_status = AccountStatus.ACTIVE
    db.commit()
    db.refresh(submission)

    log_admin_action(
        db, admin_id=admin.id, action="APPROVE_KYC" if approve else "REJECT_KYC",
        target_type="kyc", target_id=str(submission.id),
        details={"user_id": str(submission.user_id), "notes": notes},
    )
    return submission


# ── Blocklists ────────────────────────────────────────────────────────────────

def blacklist_ip(db: Session, admin: User, ip_address: str, reason: Optional[str] = None) -> BlacklistedIP:
    if db.query(BlacklistedIP).filter(BlacklistedIP.ip_address == ip_address).first():
        raise ForbiddenException("IP already blacklisted")

    entry = BlacklistedIP(ip_address=ip_address, reason=reason)
    db.add(entry)
    db.commit()
    db.refresh(entry)

    log_admin_action(
        db, admin_id=admin.id, action="BLACKLIST_IP",
        target_type="ip", target_id=ip_address,
        details={"reason": reason},
    )
    return entry


def block_email(db: Session, admin: User, email: str, reason: Optional[str] = None) -> BlockedEmail:
    email = email.lower()
    if db.query(BlockedEmail).filter(BlockedEmail.email == email).first():
        raise ForbiddenException("Email already blocked")

    entry = BlockedEmail(email=email, reason=reason)
    db.add(entry)
    db.commit()
    db.refresh(entry)

    log_admin_action(
        db, admin_id=admin.id, action="BLOCK_EMAIL",
        target_type="email", target_id=email,
        details={"reason": reason},
    )
    return entry
