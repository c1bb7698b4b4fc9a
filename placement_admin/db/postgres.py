"""
Identity database connection (PostgreSQL via SQLAlchemy).

Holds credentials only: one row per issued identity plus revoked session
tokens. Profile data lives in MongoDB.
"""
import logging
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from placement_admin.core.config import get_settings

logger = logging.getLogger(__name__)

IDENTITY_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS identities (
        user_id VARCHAR(32) PRIMARY KEY,
        email VARCHAR(320) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        role VARCHAR(20) NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS revoked_tokens (
        jti VARCHAR(64) PRIMARY KEY,
        expires_at TIMESTAMP NOT NULL
    )
    """,
]


@lru_cache()
def get_engine() -> Engine:
    """Create the engine on first use so importing this module never connects."""
    settings = get_settings()
    url = settings.postgres_url
    if url.startswith("sqlite"):
        return create_engine(url, echo=settings.debug)
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(url, pool_size=5, max_overflow=10, echo=settings.debug)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextmanager
def get_db_session(session_factory: sessionmaker = None):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM identities"))
    """
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_identity_schema(engine: Engine = None) -> None:
    """Create the identity tables if they do not exist yet."""
    with (engine or get_engine()).begin() as conn:
        for ddl in IDENTITY_SCHEMA:
            conn.execute(text(ddl))


def test_postgres_connection() -> bool:
    """
    Test if the identity database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            row = db.execute(text("SELECT 1 as test")).fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("Identity database connection failed: %s", e)
        return False
