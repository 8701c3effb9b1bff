"""Database engine and sessions."""

import logging
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for ORM tables."""


def get_engine(url) -> Engine:
    """Create an engine for ``url``.

    In-memory SQLite databases share a single connection so every session
    sees the same data.
    """
    kwargs = {}
    if str(url).startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if str(url) in ("sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = get_engine(get_settings().sqlalchemy_url())
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """Yield a session per request; commit on success, roll back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_database():
    """Create any missing tables."""
    # Imported for its side effect of registering the tables on Base.metadata
    from . import db_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
