"""
Service listings and their categories.
Browsing is public and only ever returns active listings.
"""
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictException, NotFoundException
from app.middleware.audit_middleware import log_admin_action
from app.models.service import Service, ServiceCategory
from app.models.user import User


def list_categories(db: Session) -> list[ServiceCategory]:
    return db.query(ServiceCategory).order_by(ServiceCategory.name).all()


def create_category(db: Session, admin: User, name: str, description: Optional[str] = None) -> ServiceCategory:
    if db.query(ServiceCategory).filter(func.lower(ServiceCategory.name) == name.lower()).first():
        raise ConflictException("Service category already exists")

    category = ServiceCategory(name=name, description=description)
    db.add(category)
    db.commit()
    db.refresh(category)

    log_admin_action(
        db, admin_id=admin.id, action="CREATE_CATEGORY",
        target_type="service_category", target_id=str(category.id),
        details={"name": category.name},
    )
    return category


def create_service(db: Session, provider: User, title: str, category_id: uuid.UUID, price: float,
                   description: Optional[str] = None, images: Optional[list[dict]] = None) -> Service:
    """The listing inherits the provider's city."""
    category = db.query(ServiceCategory).filter(ServiceCategory.id == category_id).first()
    if not category:
        raise NotFoundException("Service category")

    service = Service(
        title=title,
        category_id=category.id,
        provider_id=provider.id,
        price=Decimal(str(price)),
        description=description,
        images=images,
        city_id=provider.city_id,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def search_services(
    db: Session,
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    city_id: Optional[uuid.UUID] = None,
) -> list[Service]:
    """category is matched case-insensitively against the category name."""
    query = (
        db.query(Service)
        .options(joinedload(Service.category))
        .filter(Service.is_active == True)  # noqa: E712
    )
    if category:
        query = query.join(Service.category).filter(func.lower(ServiceCategory.name) == category.lower())
    if min_price is not None:
        query = query.filter(Service.price >= Decimal(str(min_price)))
    if max_price is not None:
        query = query.filter(Service.price <= Decimal(str(max_price)))
    if city_id is not None:
        query = query.filter(Service.city_id == city_id)
    return query.order_by(Service.created_at.desc()).all()


def get_service(db: Session, service_id: uuid.UUID) -> Service:
    service = (
        db.query(Service)
        .options(joinedload(Service.category))
        .filter(Service.id == service_id)
        .first()
    )
    if not service:
        raise NotFoundException("Service")
    return service
