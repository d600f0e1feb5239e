"""
Database engine management with SQLAlchemy async
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.pool import NullPool
from core.logging import mask_url
import logging

logger = logging.getLogger(__name__)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for a single run.

    NullPool is used because every run opens exactly one connection and
    releases it before exiting; nothing is reused across runs.
    """
    logger.info(f"Database: {mask_url(database_url)}")
    return create_async_engine(
        database_url,
        echo=echo,
        poolclass=NullPool,
        future=True
    )
