from functools import lru_cache
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings
from app.core.logging_config import get_logger

logger = get_logger(__name__)


@lru_cache()
def get_engine() -> Engine:
    """
    Create engine with connection pool on first use.
    pool_size: connections kept ready
    max_overflow: extra connections allowed under load
    """
    settings = get_settings()
    return create_engine(
        settings.postgres_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.debug  # Log SQL queries in debug mode
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextmanager
def get_db_session(session_factory: sessionmaker = None):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text('SELECT * FROM "CVSubmission"'))
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


def test_postgres_connection() -> bool:
    """
    Test if PostgreSQL is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.error("PostgreSQL connection failed: %s", e)
        return False


SCHEMA_STATEMENTS = [
    'CREATE EXTENSION IF NOT EXISTS "uuid-ossp"',
    """
    CREATE TABLE IF NOT EXISTS "CVSubmission" (
        id TEXT PRIMARY KEY DEFAULT uuid_generate_v4()::text,
        "fullName" TEXT NOT NULL,
        email TEXT NOT NULL,
        phone TEXT NOT NULL,
        skills TEXT[] NOT NULL,
        experience TEXT NOT NULL,
        "pdfUrl" TEXT NOT NULL,
        "pdfContent" TEXT,
        validated BOOLEAN,
        "validationResult" JSONB,
        "createdAt" TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        "updatedAt" TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_cvsubmission_createdat
    ON "CVSubmission" ("createdAt" DESC)
    """,
]


def init_database() -> None:
    """
    Create the CVSubmission table and its index if they don't exist.
    Call this once during app startup.
    """
    with get_db_session() as db:
        for statement in SCHEMA_STATEMENTS:
            db.execute(text(statement))
    logger.info("Database tables initialized successfully")
