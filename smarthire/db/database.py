import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smarthire.core.config import get_settings
from smarthire.db.tables import metadata

logger = logging.getLogger(__name__)

settings = get_settings()


def _build_engine(url: str) -> Engine:
    """
    Create the engine for the configured URL.

    SQLite needs thread sharing for the FastAPI threadpool, and an in-memory
    database must live on a single connection or every session sees an empty
    schema.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.debug, **kwargs)

    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(url, pool_size=5, max_overflow=10, echo=settings.debug)


engine = _build_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create all tables that do not exist yet."""
    metadata.create_all(engine)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(select(users))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_db_connection() -> bool:
    """
    Test if the relational store is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            return db.execute(select(1)).scalar() == 1
    except Exception as e:
        logger.warning("Database connection failed: %s", e)
        return False


def fetch_all(statement) -> list:
    """Execute a statement and return results as list of dicts."""
    with get_db_session() as db:
        return [dict(row) for row in db.execute(statement).mappings().all()]


def fetch_one(statement):
    """Execute a statement and return the first row as a dict, or None."""
    with get_db_session() as db:
        row = db.execute(statement).mappings().first()
        return dict(row) if row else None
