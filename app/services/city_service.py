from typing import Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.city import City


def create_city(db: Session, name: str, region: Optional[str] = None) -> City:
    city = City(name=name, region=region)
    db.add(city)
    db.commit()
    db.refresh(city)
    return city


def get_city(db: Session, city_id) -> City:
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise NotFoundException("City")
    return city


def list_cities(db: Session, region: Optional[str] = None) -> list[City]:
    query = db.query(City)
    if region:
        query = query.filter(City.region == region)
    return query.order_by(City.name).all()
