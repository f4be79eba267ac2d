"""
Engine, session factory and the get_db dependency.

One Session per request; services call db.commit() themselves, nothing is
committed implicitly.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from app.config import settings


engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # drop connections the server closed while idle
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


class Base(DeclarativeBase):
    pass


def get_db():
    """
    Yields a Session and closes it when the request is done.
    Tests override this dependency to point at SQLite.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
