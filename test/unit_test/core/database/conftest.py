"""Test configuration for database unit tests.

This module provides common fixtures for testing the centralized database
layer against an in-memory SQLite database, plus a few row builders.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

from telloom.core.database import create_all, create_sessionmaker
from telloom.core.database.entities import Profile, ProfileSharer, Prompt
from telloom.core.database.repositories import TelloomRepoBundle, build_repos_from_session


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture(scope="function")
def db(in_memory_session: AsyncSession) -> TelloomRepoBundle:
    return build_repos_from_session(session=in_memory_session)


class Rows:
    """Builders for rows most repository tests need."""

    def __init__(self, db: TelloomRepoBundle) -> None:
        self.db = db

    async def profile(self, email: Optional[str] = None, **fields) -> Profile:
        profile_id = str(uuid4())
        return await self.db.profiles.create(
            Profile(id=profile_id, email=email or f"{profile_id[:8]}@example.com", **fields)
        )

    async def sharer(self, **fields) -> ProfileSharer:
        profile = await self.profile(**fields)
        return await self.db.sharers.create(ProfileSharer(profile_id=profile.id))

    async def prompt(self, text: str = "Where did you grow up?", category_id: Optional[str] = None) -> Prompt:
        return await self.db.prompts.create(Prompt(prompt_text=text, prompt_category_id=category_id))


@pytest.fixture
def rows(db: TelloomRepoBundle) -> Rows:
    return Rows(db)
