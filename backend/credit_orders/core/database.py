"""
PostgreSQL database access

This module centralizes every way the service talks to the database:
- SQLAlchemy engine and declarative Base (table definitions, schema bootstrap)
- psycopg2 direct connections (raw SQL in the repositories)
- transaction() context manager (one commit/rollback boundary per unit of work)

Author: TM3
Date: 2025-10-17
"""
import logging
import time
from contextlib import contextmanager

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

CONNECTION_TIMEOUT = settings.DB_CONNECT_TIMEOUT


# ============================================================================
# SQLAlchemy Configuration (table definitions and schema bootstrap)
# ============================================================================

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connection before use
    pool_size=5,
    max_overflow=10,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def _database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not configured")
    return database_url


def get_db_connection():
    """
    Get a direct psycopg2 database connection (returns tuples)

    Returns:
        psycopg2 connection object

    Raises:
        RuntimeError if DATABASE_URL is not configured
    """
    return psycopg2.connect(_database_url(), connect_timeout=CONNECTION_TIMEOUT)


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Use this for repository reads; rows map straight onto domain models.

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM orders")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(
        _database_url(),
        cursor_factory=RealDictCursor,
        connect_timeout=CONNECTION_TIMEOUT,
    )


# ============================================================================
# Database Connection with Retry Logic
# ============================================================================

def get_db_connection_with_retry(max_retries=None, retry_delay=None, cursor_factory=None):
    """
    Get a psycopg2 connection with automatic retry on connection failures

    Retries failed connections up to max_retries times with exponential
    backoff between attempts. Only psycopg2.OperationalError is retried;
    anything else fails immediately.

    Args:
        max_retries: Maximum number of connection attempts (default: settings.DB_MAX_RETRIES)
        retry_delay: Initial delay between retries in seconds (default: settings.DB_RETRY_DELAY)
        cursor_factory: Optional cursor factory (e.g. RealDictCursor)

    Returns:
        psycopg2 connection object

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = _database_url()
    max_retries = max_retries or settings.DB_MAX_RETRIES
    retry_delay = settings.DB_RETRY_DELAY if retry_delay is None else retry_delay

    connect_kwargs = {'connect_timeout': CONNECTION_TIMEOUT}
    if cursor_factory is not None:
        connect_kwargs['cursor_factory'] = cursor_factory

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url, **connect_kwargs)
            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            # Don't retry on last attempt
            if attempt == max_retries:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

            delay = retry_delay * (2 ** (attempt - 1))
            logger.info(f"Retrying in {delay:.2f} seconds...")
            time.sleep(delay)


def get_db_connection_dict_with_retry(max_retries=None, retry_delay=None):
    """Same as get_db_connection_with_retry but returns dicts instead of tuples."""
    return get_db_connection_with_retry(
        max_retries=max_retries,
        retry_delay=retry_delay,
        cursor_factory=RealDictCursor,
    )


@contextmanager
def transaction():
    """
    Context manager for a single database transaction

    Commits when the block exits normally, rolls back and re-raises on any
    exception, and always closes the connection.

    Usage:
        with transaction() as conn:
            repo.create(conn, ...)
    """
    conn = get_db_connection_dict_with_retry()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
