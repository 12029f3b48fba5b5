"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlmodel.ext.asyncio.session import AsyncSession

from telloom.core.logging_config import get_logger
from telloom.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLModel session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    Against Postgres the schema is owned by Alembic migrations and nothing is
    done here. SQLite databases (local development) get their tables created
    from the ORM metadata.
    """
    if engine.dialect.name == "sqlite":
        logger.info("Creating tables from ORM metadata for SQLite database")
        await create_all(engine)
    else:
        logger.info("Schema is managed by Alembic migrations; skipping create_all")
