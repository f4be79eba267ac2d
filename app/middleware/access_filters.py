"""
Request filters applied to every route as app-level dependencies.

They are dependencies rather than Starlette middleware so they share the
request's DB session through get_db (and its test override).

  - block_blacklisted_ip: 403 when the client IP is blacklisted
  - block_blocked_email:  403 when a JSON body's "email" is blocked
  - resolve_tenant:       sets request.state.tenant from X-Tenant-ID or the Host subdomain
"""
import json
import logging
import uuid

from fastapi import Depends, Request
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenException, NotFoundException
from app.database import get_db
from app.models.blocklist import BlacklistedIP, BlockedEmail
from app.models.tenant import Tenant
from app.services import tenant_service

logger = logging.getLogger(__name__)

LOCAL_HOSTS = {"localhost", "127.0.0.1"}


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def block_blacklisted_ip(request: Request, db: Session = Depends(get_db)) -> None:
    ip_address = client_ip(request)
    if ip_address and db.query(BlacklistedIP).filter(BlacklistedIP.ip_address == ip_address).first():
        logger.warning("Rejected request from blacklisted IP %s", ip_address)
        raise ForbiddenException("Access denied from this IP address")


async def block_blocked_email(request: Request, db: Session = Depends(get_db)) -> None:
    body = await request.body()
    if not body:
        return
    try:
        payload = json.loads(body)
    except ValueError:
        # malformed bodies are left to request validation
        return
    email = payload.get("email") if isinstance(payload, dict) else None
    if not isinstance(email, str):
        return

    if db.query(BlockedEmail).filter(BlockedEmail.email == email.lower()).first():
        logger.warning("Rejected request for blocked email")
        raise ForbiddenException("This email address is blocked")


def _tenant_from_header(db: Session, tenant_id: str) -> Tenant:
    try:
        parsed = uuid.UUID(tenant_id)
    except ValueError:
        raise NotFoundException("Tenant")
    tenant = tenant_service.get_tenant(db, parsed)
    if not tenant.is_active:
        raise NotFoundException("Tenant")
    return tenant


def resolve_tenant(request: Request, db: Session = Depends(get_db)) -> None:
    """
    X-Tenant-ID wins over the Host header. An unknown header value is a 404;
    an unknown subdomain simply leaves the request without a tenant.
    """
    tenant = None
    header_value = request.headers.get("x-tenant-id")
    if header_value:
        tenant = _tenant_from_header(db, header_value)
    else:
        host = request.headers.get("host", "").split(":")[0]
        labels = host.split(".")
        if host not in LOCAL_HOSTS and len(labels) > 2:
            tenant = tenant_service.find_by_subdomain(db, labels[0])
    request.state.tenant = tenant
