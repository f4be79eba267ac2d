from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.city import CityOut
from app.services import city_service

router = APIRouter()


@router.get("", response_model=List[CityOut])
def list_cities(
    db: Session = Depends(get_db),
    region: Optional[str] = Query(None),
):
    return city_service.list_cities(db, region)
