from typing import Optional
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, NotFoundException
from app.models.tenant import Tenant


def find_by_subdomain(db: Session, subdomain: str) -> Optional[Tenant]:
    """Active tenants only; an inactive tenant's subdomain resolves to nothing."""
    return (
        db.query(Tenant)
        .filter(Tenant.subdomain == subdomain.lower(), Tenant.is_active == True)  # noqa: E712
        .first()
    )


def get_tenant(db: Session, tenant_id) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise NotFoundException("Tenant")
    return tenant


def create_tenant(db: Session, name: str, subdomain: Optional[str] = None) -> Tenant:
    if db.query(Tenant).filter(Tenant.name == name).first():
        raise ConflictException("Tenant already exists")
    tenant = Tenant(name=name, subdomain=subdomain.lower() if subdomain else None)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def list_tenants(db: Session) -> list[Tenant]:
    return db.query(Tenant).order_by(Tenant.name).all()
