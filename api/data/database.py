"""
Database Module
Engine construction and scoped session acquisition
"""

from contextlib import contextmanager
from typing import Iterator, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from ..config import Settings
from .models import Base


def database_url(settings: Settings) -> Union[str, URL]:
    """DATABASE_URL when given, otherwise the MySQL URL assembled from DB_*."""
    if settings.database_url:
        return settings.database_url
    return URL.create(
        "mysql+pymysql",
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        database=settings.db_name,
        query={"charset": "utf8mb4"},
    )


def create_db_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured store.

    NullPool: every session opens its own connection and closes it when the
    session ends. An invocation may be frozen or discarded at any time, so
    nothing is kept open between requests.
    """
    url = database_url(settings)
    connect_args = {}
    if str(url).startswith("mysql"):
        # PyMySQL waits forever on reads and writes unless told otherwise
        timeout = max(1, int(settings.upstream_timeout))
        connect_args["connect_timeout"] = timeout
        connect_args["read_timeout"] = timeout
        connect_args["write_timeout"] = timeout
    return create_engine(url, poolclass=NullPool, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    # Rows handed back after commit must stay readable without a new round trip
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Acquire a session, always release it, roll back anything uncommitted."""
    session = session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist (idempotent)."""
    Base.metadata.create_all(bind=engine)
