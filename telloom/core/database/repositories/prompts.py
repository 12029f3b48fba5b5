"""
Prompt catalogue and topic bookmark repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.prompts import Prompt, PromptCategory, TopicFavorite, TopicQueueItem
from .base import SQLModelRepository


class PromptCategoryRepository(SQLModelRepository[PromptCategory]):
    """Repository for topics (prompt categories)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptCategory)

    async def list_all(self) -> List[PromptCategory]:
        """Get every topic ordered by name."""
        stmt = select(PromptCategory).order_by(PromptCategory.category)
        return await self._all(stmt)


class PromptRepository(SQLModelRepository[Prompt]):
    """Repository for prompts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Prompt)

    async def list_by_category(self, category_id: str) -> List[Prompt]:
        """Get the prompts of a topic, context-establishing prompts first."""
        stmt = (
            select(Prompt)
            .where(Prompt.prompt_category_id == category_id)
            .order_by(Prompt.is_context_establishing.desc(), Prompt.created_at)  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def count_by_category(self) -> Dict[str, int]:
        """Get the number of prompts per topic id."""
        stmt = (
            select(Prompt.prompt_category_id, func.count())
            .where(Prompt.prompt_category_id.is_not(None))  # type: ignore[union-attr]
            .group_by(Prompt.prompt_category_id)
        )
        result = await self.session.exec(stmt)
        return {category_id: int(count) for category_id, count in result.all()}


TopicBookmark = Union[TopicFavorite, TopicQueueItem]


class _TopicBookmarkRepository(SQLModelRepository):
    """Shared lookups for the favourite and queue tables, which have the same shape."""

    def _scope(self, stmt, profile_id: str, role: Optional[str], sharer_id: Optional[str]):
        model = self.model
        stmt = stmt.where(model.profile_id == profile_id)
        stmt = stmt.where(model.role == role) if role is not None else stmt.where(model.role.is_(None))
        if sharer_id is not None:
            return stmt.where(model.sharer_id == sharer_id)
        return stmt.where(model.sharer_id.is_(None))

    async def get_scoped(
        self, profile_id: str, category_id: str, role: Optional[str], sharer_id: Optional[str]
    ) -> Optional[TopicBookmark]:
        """Get the bookmark of a topic for a profile within a role/sharer scope.

        Args:
            profile_id: Profile that made the bookmark
            category_id: Bookmarked topic
            role: Role the bookmark was made under
            sharer_id: Sharer the bookmark was made for (executor view)

        Returns:
            The bookmark row or None
        """
        stmt = self._scope(select(self.model), profile_id, role, sharer_id)
        stmt = stmt.where(self.model.prompt_category_id == category_id)
        return await self._first(stmt)

    async def category_ids(self, profile_id: str, role: Optional[str], sharer_id: Optional[str]) -> set[str]:
        stmt = self._scope(select(self.model), profile_id, role, sharer_id)
        return {row.prompt_category_id for row in await self._all(stmt)}

    async def delete_where(self, *, category_id: Optional[str] = None, executor_id: Optional[str] = None) -> int:
        """Drop every bookmark of a topic and/or every bookmark made through an executor link.

        Returns:
            Number of rows deleted
        """
        if category_id is None and executor_id is None:
            return 0
        stmt = delete(self.model)
        if category_id is not None:
            stmt = stmt.where(self.model.prompt_category_id == category_id)
        if executor_id is not None:
            stmt = stmt.where(self.model.executor_id == executor_id)
        result = await self.session.exec(stmt)  # type: ignore[call-overload]
        await self.session.commit()
        return result.rowcount


class TopicFavoriteRepository(_TopicBookmarkRepository):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TopicFavorite)


class TopicQueueRepository(_TopicBookmarkRepository):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TopicQueueItem)


