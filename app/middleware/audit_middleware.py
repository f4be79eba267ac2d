"""
Audit log helper. Not an HTTP middleware; it is a utility function called
explicitly by admin service functions after any state-changing operation.

Usage:
    from app.middleware.audit_middleware import log_admin_action

    log_admin_action(db, admin_id=admin.id, action="UPDATE_USER_STATUS",
                     target_type="user", target_id=str(user.id),
                     details={"from": "PENDING", "to": "ACTIVE"})
"""
import logging
import uuid
from sqlalchemy.orm import Session
from typing import Optional
from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def log_admin_action(
    db: Session,
    admin_id: uuid.UUID,
    action: str,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    details: Optional[dict] = None,
) -> AuditLog:
    """
    Insert an immutable audit log record.

    Args:
        db: database session
        admin_id: id of the admin performing the action
        action: string constant like "APPROVE_KYC", "BLACKLIST_IP", "CREATE_ROLE"
        target_type: entity type affected ("user", "role", "kyc", "ip", "email", ...)
        target_id: id (or value, for ip/email) of the affected entity
        details: optional dict with extra context (before/after values, notes)

    Returns the created AuditLog record.
    """
    log = AuditLog(
        admin_id=admin_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    logger.info("Admin %s performed %s on %s %s", admin_id, action, target_type, target_id)
    return log
