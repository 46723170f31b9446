from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from adset_engine.settings import settings


class Base(DeclarativeBase):
    pass


def get_engine(url: str | None = None):
    return create_engine(url or settings.DATABASE_URL, pool_pre_ping=True)


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
