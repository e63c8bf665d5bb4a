# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy engine, session factory, declarative base, and the FastAPI
dependency that provides a transactional DB session per request.
"""

import secrets
import time

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from rauta.core.config import settings

# SQLite connections are handed between the threadpool workers FastAPI runs
# sync endpoints on.
_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

# pool_pre_ping keeps idle connections alive across MySQL's wait_timeout
engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def generate_id(prefix: str) -> str:
    """
    Opaque primary key of the form ``<prefix>_<epoch millis>_<random>``,
    e.g. ``user_1760870400000_k3j9x0a2b1``.
    """
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(5)}"


def get_db():
    """
    FastAPI dependency.  Yields a session for the duration of the request,
    then closes it.  Use with Depends(get_db).
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
