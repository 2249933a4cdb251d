from contextlib import contextmanager
from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import get_settings


class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: Optional[str] = None):
    settings = get_settings()
    url = database_url or settings.database_url
    connect_args = {}
    if url.startswith("postgresql"):
        connect_args["connect_timeout"] = settings.db_connect_timeout
    return create_engine(url, pool_pre_ping=True, future=True, connect_args=connect_args)


@lru_cache(maxsize=1)
def get_engine():
    return create_db_engine()


@lru_cache(maxsize=1)
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autocommit=False, autoflush=False, future=True)


def init_db(engine=None):
    from .models import Property  # noqa: F401
    Base.metadata.create_all(bind=engine or get_engine())


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None):
    session = (factory or get_sessionmaker())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
