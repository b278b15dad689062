"""
Database connection module.

Engine and session factory are created lazily so importing the app never
touches the database.
"""

import os
import time
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from customer_demo.config import settings

logger = logging.getLogger(__name__)

LOCAL_DATABASE_URL = "sqlite:///./customers.db"


def get_database_url() -> str:
    """
    Resolve the database URL.

    The process environment wins over .env / settings, and local development
    falls back to a SQLite file in the working directory.
    """
    url = os.environ.get("DATABASE_URL") or settings.DATABASE_URL

    if not url:
        return LOCAL_DATABASE_URL

    # Remove accidental whitespace/quotes
    url = url.strip().strip("'").strip('"')

    # Hosted Postgres hands out postgres:// URLs; route them to psycopg 3
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)

    return url


def create_app_engine():
    """Create SQLAlchemy engine with connection pooling suited to the backend."""
    db_url = get_database_url()

    if db_url.startswith("sqlite"):
        logger.info(f"Configuring SQLite database engine: {db_url}")
        return create_engine(
            db_url,
            echo=settings.SQL_ECHO,
            connect_args={"check_same_thread": False},
        )

    # Sanitized host logging
    host = db_url.split("@")[1].split(":")[0] if "@" in db_url else "unknown"
    logger.info(f"Configuring database engine for host: {host}")

    return create_engine(
        db_url,
        echo=settings.SQL_ECHO,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=5,
        max_overflow=10,
        connect_args={"connect_timeout": 10},
    )


# Singleton instances
_engine = None
_SessionLocal = None


def get_engine():
    """Lazy engine initialization to prevent import-time crashes."""
    global _engine
    if _engine is None:
        _engine = create_app_engine()
    return _engine


def get_session_local():
    """Lazy session factory initialization."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def dispose_engine():
    """Drop the cached engine and session factory (URL changes, tests, shutdown)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def connect_with_retry(max_retries=None, delay=None):
    """Wait for the database, backing off a little longer after each failure."""
    max_retries = max_retries or settings.DB_CONNECT_RETRIES
    delay = settings.DB_CONNECT_DELAY if delay is None else delay
    last_error = None
    for attempt in range(max_retries):
        try:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
                logger.info("Database connection established successfully.")
                return True
        except Exception as e:
            last_error = e
            wait = delay * (attempt + 1)
            logger.warning(f"DB connection attempt {attempt + 1} failed. Retrying in {wait}s...")
            time.sleep(wait)
    logger.error(f"Failed to connect: {last_error}")
    return False


# Base class for models
Base = declarative_base()


def get_db():
    Session = get_session_local()
    db = Session()
    try:
        yield db
    finally:
        db.close()


def check_database_health() -> bool:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False
