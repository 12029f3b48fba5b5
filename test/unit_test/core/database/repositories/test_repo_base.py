"""Unit tests for the shared SQLModel repository.

The first class drives the CRUD surface with a mocked session, the second
checks ordering, filtering and pagination against a real SQLite database.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from telloom.core.database.base import UTCDateTime, utc_now
from telloom.core.database.entities import PromptCategory
from telloom.core.database.repositories import PromptCategoryRepository


class TestSQLModelRepositoryWithMockedSession:
    """CRUD operations against a mocked async session."""

    @pytest.fixture
    def mock_session(self):
        session = AsyncMock()
        session.add = MagicMock()
        session.commit = AsyncMock()
        session.refresh = AsyncMock()
        session.delete = AsyncMock()
        mock_result = MagicMock()
        mock_result.one_or_none = MagicMock(return_value=None)
        session.exec = AsyncMock(return_value=mock_result)
        return session

    @pytest.fixture
    def repository(self, mock_session):
        return PromptCategoryRepository(mock_session)

    @pytest.mark.asyncio
    async def test_create_commits_and_refreshes(self, repository, mock_session):
        topic = PromptCategory(category="Childhood")

        result = await repository.create(topic)

        assert result is topic
        mock_session.add.assert_called_once_with(topic)
        mock_session.commit.assert_awaited_once()
        mock_session.refresh.assert_awaited_once_with(topic)

    @pytest.mark.asyncio
    async def test_update_bumps_updated_at(self, repository, mock_session):
        topic = PromptCategory(category="Childhood")
        topic.updated_at = utc_now() - timedelta(days=1)
        before = topic.updated_at

        await repository.update(topic)

        assert topic.updated_at > before
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, repository, mock_session):
        assert await repository.delete("missing") is False
        mock_session.delete.assert_not_awaited()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_existing(self, repository, mock_session):
        topic = PromptCategory(category="Childhood")
        mock_session.exec.return_value.one_or_none.return_value = topic

        assert await repository.delete(topic.id) is True
        mock_session.delete.assert_awaited_once_with(topic)
        mock_session.commit.assert_awaited_once()


class TestSQLModelRepositoryWithDatabase:
    @pytest.mark.asyncio
    async def test_get_by_id(self, db):
        topic = await db.topics.create(PromptCategory(category="Work"))
        assert (await db.topics.get_by_id(topic.id)).category == "Work"
        assert await db.topics.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_list_newest_first_with_pagination(self, db):
        start = utc_now()
        for i, name in enumerate(["A", "B", "C"]):
            await db.topics.create(PromptCategory(category=name, created_at=start + timedelta(minutes=i)))

        assert [t.category for t in await db.topics.list()] == ["C", "B", "A"]
        assert [t.category for t in await db.topics.list(limit=1, offset=1)] == ["B"]

    @pytest.mark.asyncio
    async def test_list_filters_ignore_unknown_and_none(self, db):
        await db.topics.create(PromptCategory(category="Work", theme="career"))
        await db.topics.create(PromptCategory(category="Family", theme="home"))

        filtered = await db.topics.list(filters={"theme": "home", "no_such_column": "x", "description": None})
        assert [t.category for t in filtered] == ["Family"]

    @pytest.mark.asyncio
    async def test_delete_removes_row(self, db):
        topic = await db.topics.create(PromptCategory(category="Work"))
        assert await db.topics.delete(topic.id) is True
        assert await db.topics.get_by_id(topic.id) is None

    @pytest.mark.asyncio
    async def test_list_all_orders_by_name(self, db):
        for name in ["Work", "Childhood", "Family"]:
            await db.topics.create(PromptCategory(category=name))
        assert [t.category for t in await db.topics.list_all()] == ["Childhood", "Family", "Work"]


class TestUTCTimestamps:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is timezone.utc

    def test_bind_takes_naive_values_as_utc(self):
        column_type = UTCDateTime()
        naive = datetime(2026, 1, 1, 12, 0)
        assert column_type.process_bind_param(naive, None) == naive.replace(tzinfo=timezone.utc)
        assert column_type.process_bind_param(None, None) is None

    def test_bind_converts_other_offsets(self):
        plus_two = timezone(timedelta(hours=2))
        value = UTCDateTime().process_bind_param(datetime(2026, 1, 1, 14, 0, tzinfo=plus_two), None)
        assert value == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert value.tzinfo is timezone.utc

    @pytest.mark.asyncio
    async def test_rows_round_trip_as_aware_utc(self, db):
        topic = await db.topics.create(PromptCategory(category="Work", created_at=datetime(2026, 1, 1, 12, 0)))
        db.topics.session.expunge_all()

        loaded = await db.topics.get_by_id(topic.id)
        assert loaded.created_at == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert loaded.updated_at.tzinfo is timezone.utc
        assert loaded.updated_at <= utc_now()
