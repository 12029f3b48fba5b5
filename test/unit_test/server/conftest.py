import os
from typing import Any, AsyncGenerator, Dict, Iterable, Optional
from unittest.mock import patch
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set test database URL before importing app
os.environ["DATABASE_URL"] = TEST_DATABASE_URL


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    from telloom.core.database import create_all

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, connection_record):
        # SQLite leaves FK checks off unless asked, Postgres always has them on
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    from telloom.core.database import create_sessionmaker

    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession):
    from telloom.core.database.repositories import build_repos_from_session

    return build_repos_from_session(session=session)


@pytest.fixture(autouse=True)
def _clear_url_cache():
    from telloom.core.url_cache import url_cache

    url_cache.clear()
    yield
    url_cache.clear()


class Factory:
    """Creates rows directly through the repositories and registers auth users."""

    def __init__(self, repos, auth_users: Dict[str, Dict[str, Any]]) -> None:
        self.repos = repos
        self.auth_users = auth_users

    def auth_user(self, user_id: Optional[str] = None, email: Optional[str] = None, **user_metadata: Any) -> str:
        user_id = user_id or str(uuid4())
        self.auth_users[user_id] = {
            "id": user_id,
            "email": email or f"{user_id[:8]}@example.com",
            "user_metadata": user_metadata,
        }
        return user_id

    @staticmethod
    def headers(profile_or_id) -> Dict[str, str]:
        token = profile_or_id if isinstance(profile_or_id, str) else profile_or_id.id
        return {"Authorization": f"Bearer {token}"}

    async def profile(
        self,
        first_name: str = "Test",
        last_name: str = "User",
        email: Optional[str] = None,
        roles: Iterable = (),
        is_admin: bool = False,
    ):
        from telloom.core.database.entities import Profile

        user_id = self.auth_user(email=email)
        profile = await self.repos.profiles.create(
            Profile(
                id=user_id,
                email=self.auth_users[user_id]["email"],
                first_name=first_name,
                last_name=last_name,
                full_name=f"{first_name} {last_name}",
                is_admin=is_admin,
            )
        )
        for role in roles:
            await self.repos.roles.ensure_role(profile.id, role)
        return profile

    async def sharer(self, first_name: str = "Sam", last_name: str = "Sharer", email: Optional[str] = None):
        """Profile holding the SHARER role, with its sharer record."""
        from telloom.core.database.entities import ProfileSharer
        from telloom.core.models.domain.enums import Role

        profile = await self.profile(first_name, last_name, email=email, roles=[Role.SHARER])
        sharer = await self.repos.sharers.create(ProfileSharer(profile_id=profile.id))
        return profile, sharer

    async def listener(self, sharer, first_name: str = "Lee", has_access: bool = True, email: Optional[str] = None):
        from telloom.core.database.entities import ProfileListener
        from telloom.core.models.domain.enums import Role

        profile = await self.profile(first_name, "Listener", email=email, roles=[Role.LISTENER])
        link = await self.repos.listeners.create(
            ProfileListener(listener_id=profile.id, sharer_id=sharer.id, has_access=has_access)
        )
        return profile, link

    async def executor(self, sharer, first_name: str = "Eve"):
        from telloom.core.database.entities import ProfileExecutor
        from telloom.core.models.domain.enums import Role

        profile = await self.profile(first_name, "Executor", roles=[Role.EXECUTOR])
        link = await self.repos.executors.create(ProfileExecutor(sharer_id=sharer.id, executor_id=profile.id))
        return profile, link

    async def admin(self):
        return await self.profile("Ada", "Admin", is_admin=True)

    async def topic(self, category: str = "Childhood", description: Optional[str] = None):
        from telloom.core.database.entities import PromptCategory

        return await self.repos.topics.create(PromptCategory(category=category, description=description))

    async def prompt(self, topic=None, text: str = "What was your first home like?"):
        from telloom.core.database.entities import Prompt

        return await self.repos.prompts.create(
            Prompt(prompt_text=text, prompt_category_id=topic.id if topic is not None else None)
        )

    async def response(self, sharer, prompt, **fields: Any):
        from telloom.core.database.entities import PromptResponse

        return await self.repos.responses.create(
            PromptResponse(profile_sharer_id=sharer.id, prompt_id=prompt.id, **fields)
        )

    async def video(self, sharer, prompt=None, **fields: Any):
        from telloom.core.database.entities import Video

        return await self.repos.videos.create(
            Video(profile_sharer_id=sharer.id, prompt_id=prompt.id if prompt is not None else None, **fields)
        )


@pytest.fixture
def factory(repos, auth_users) -> Factory:
    return Factory(repos, auth_users)


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, auth_api, mux_api, loops_api, storage_api
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from telloom.core.database import get_session
    from telloom.integrations.auth_client import AuthClient
    from telloom.integrations.loops import LoopsClient
    from telloom.integrations.mux import MuxClient
    from telloom.integrations.storage import StorageClient
    from telloom.server.main import app
    from telloom.server.services.deps import (
        get_auth_client,
        get_loops_client,
        get_mux_client,
        get_storage_client,
    )

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    auth_client = AuthClient("http://mock-auth", api_key="anon-key", client=auth_api.client())
    mux_client = MuxClient(
        "http://mock-mux",
        token_id="token-id",
        token_secret="token-secret",
        stream_base_url="http://mock-stream",
        client=mux_api.client(),
    )
    loops_client = LoopsClient("http://mock-loops", api_key="loops-key", client=loops_api.client())
    storage_client = StorageClient("http://mock-storage", service_key="service-key", client=storage_api.client())

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_mux_client] = lambda: mux_client
    app.dependency_overrides[get_loops_client] = lambda: loops_client
    app.dependency_overrides[get_storage_client] = lambda: storage_client

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("telloom.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
    for upstream_client in (auth_client, mux_client, loops_client, storage_client):
        await upstream_client.aclose()
