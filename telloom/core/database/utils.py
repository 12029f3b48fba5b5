"""Engine and session factory helpers shared by the server, Alembic and the tests."""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from . import entities  # noqa: F401  # registers every table on Base.metadata
from .base import Base


def create_engine(db_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Postgres URLs are rewritten so the async driver is used, e.g.
    ``postgres://`` or ``postgresql+psycopg://`` become ``postgresql+asyncpg://``.
    Other URLs (``sqlite+aiosqlite://`` in tests) are passed through.
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    if url.startswith("postgresql+asyncpg://"):
        return create_async_engine(url, pool_pre_ping=True)
    return create_async_engine(url)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep attribute values after commit so handlers can serialise returned rows."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every table on ``engine``. Used by tests and local runs; deployments migrate with Alembic."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
