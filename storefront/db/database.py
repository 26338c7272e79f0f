from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from storefront.config import Settings, settings as default_settings
from storefront.db.schema import metadata
import asyncio
import logging

logger = logging.getLogger(__name__)


def build_engine(settings: Optional[Settings] = None) -> Engine:
    """Create the SQLAlchemy engine; its pool is the only connection pool in the service"""
    settings = settings or default_settings

    if settings.database_url.startswith("sqlite"):
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        connect_args={
            "connect_timeout": settings.db_connect_timeout,
        },
        pool_timeout=settings.db_pool_timeout,
    )


class ConnectionProvider:
    """Hands out one scoped connection per store operation"""

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Connection for read-only statements, returned to the pool on exit"""
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Connection in a transaction: commits on success, rolls back on error"""
        with self.engine.begin() as conn:
            yield conn

    def dispose(self) -> None:
        self.engine.dispose()


async def wait_for_database(provider: ConnectionProvider, max_retries=30, retry_delay=2):
    """Wait for database to be available with retry logic"""
    # Only log the host part of the URL
    db_url_display = provider.engine.url.render_as_string(hide_password=True)
    if "@" in db_url_display:
        db_url_display = db_url_display.split("@")[-1]

    logger.info(f"Waiting for database connection to {db_url_display}...")

    for attempt in range(1, max_retries + 1):
        try:
            with provider.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            if attempt < max_retries:
                logger.warning(f"Database connection attempt {attempt}/{max_retries} failed: {e}. Retrying in {retry_delay}s...")
                await asyncio.sleep(retry_delay)
            else:
                logger.error(f"Database connection failed after {max_retries} attempts: {e}")
                raise
    return False


async def init_db(provider: ConnectionProvider):
    """Initialize database by creating the catalog tables when they are missing"""
    await wait_for_database(provider, max_retries=30, retry_delay=2)

    logger.info("Creating catalog tables if missing...")
    try:
        await asyncio.to_thread(metadata.create_all, provider.engine)
    except Exception as e:
        logger.error(f"Error creating tables: {e}", exc_info=True)
        # Re-raise to prevent service from starting without a schema
        raise
    logger.info("Database initialized successfully")
