"""
Service listings router.

Public:
  GET  /services/categories
  GET  /services?category=&minPrice=&maxPrice=&cityId=
  GET  /services/{id}

Authenticated:
  POST /services                              (active provider accounts)
  POST /services/admin/service-categories     (active + USER_WRITE)
"""
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import require_active_account, require_account_types, require_permissions
from app.models.enums import PROVIDER_ACCOUNT_TYPES
from app.models.user import User
from app.schemas.service import CategoryCreateRequest, CategoryOut, ServiceCreateRequest, ServiceOut
from app.services import listing_service

router = APIRouter()

require_provider = require_account_types(*PROVIDER_ACCOUNT_TYPES)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return listing_service.list_categories(db)


@router.post(
    "/admin/service-categories",
    response_model=CategoryOut,
    status_code=201,
    dependencies=[Depends(require_permissions("create_category"))],
)
def create_category(
    body: CategoryCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_active_account),
):
    return listing_service.create_category(db, admin, name=body.name, description=body.description)


@router.post(
    "",
    response_model=ServiceOut,
    status_code=201,
    dependencies=[Depends(require_provider)],
)
def create_service(
    body: ServiceCreateRequest,
    db: Session = Depends(get_db),
    provider: User = Depends(require_active_account),
):
    images = [image.model_dump() for image in body.images] if body.images else None
    return listing_service.create_service(
        db, provider,
        title=body.title,
        category_id=body.category_id,
        price=body.price,
        description=body.description,
        images=images,
    )


@router.get("", response_model=List[ServiceOut])
def search_services(
    db: Session = Depends(get_db),
    category: Optional[str] = Query(None, description="Category name, case-insensitive"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    city_id: Optional[uuid.UUID] = Query(None, alias="cityId"),
):
    return listing_service.search_services(
        db, category=category, min_price=min_price, max_price=max_price, city_id=city_id,
    )


@router.get("/{service_id}", response_model=ServiceOut)
def get_service(service_id: uuid.UUID, db: Session = Depends(get_db)):
    return listing_service.get_service(db, service_id)
