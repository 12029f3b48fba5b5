"""
Prompt response repositories.

Data access for responses, their attachments and the per-viewer favourite
and watch-history rows.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.responses import (
    PromptResponse,
    PromptResponseAttachment,
    PromptResponseFavorite,
    PromptResponseRecentlyWatched,
)
from .base import SQLModelRepository


class PromptResponseRepository(SQLModelRepository[PromptResponse]):
    """Repository for prompt response data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptResponse)

    async def get_for_prompt(self, sharer_id: str, prompt_id: str) -> Optional[PromptResponse]:
        """Get a sharer's response to a prompt.

        Args:
            sharer_id: ProfileSharer id
            prompt_id: Prompt id

        Returns:
            PromptResponse instance or None
        """
        stmt = select(PromptResponse).where(
            (PromptResponse.profile_sharer_id == sharer_id) & (PromptResponse.prompt_id == prompt_id)
        )
        return await self._first(stmt)

    async def get_by_video_id(self, video_id: str) -> Optional[PromptResponse]:
        stmt = select(PromptResponse).where(PromptResponse.video_id == video_id)
        return await self._first(stmt)

    async def list_for_sharer(self, sharer_id: str, prompt_ids: Optional[List[str]] = None) -> List[PromptResponse]:
        stmt = select(PromptResponse).where(PromptResponse.profile_sharer_id == sharer_id)
        if prompt_ids is not None:
            stmt = stmt.where(PromptResponse.prompt_id.in_(prompt_ids))  # type: ignore[union-attr]
        return await self._all(stmt)


class PromptResponseAttachmentRepository(SQLModelRepository[PromptResponseAttachment]):
    """Repository for files attached to responses."""

    order_by = "uploaded_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptResponseAttachment)

    async def list_for_response(self, response_id: str) -> List[PromptResponseAttachment]:
        stmt = (
            select(PromptResponseAttachment)
            .where(PromptResponseAttachment.prompt_response_id == response_id)
            .order_by(PromptResponseAttachment.uploaded_at)
        )
        return await self._all(stmt)


class PromptResponseFavoriteRepository(SQLModelRepository[PromptResponseFavorite]):
    """Repository for favourite responses."""

    order_by = "favorited_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptResponseFavorite)

    async def get_pair(self, profile_id: str, response_id: str) -> Optional[PromptResponseFavorite]:
        stmt = select(PromptResponseFavorite).where(
            (PromptResponseFavorite.profile_id == profile_id)
            & (PromptResponseFavorite.prompt_response_id == response_id)
        )
        return await self._first(stmt)


class RecentlyWatchedRepository(SQLModelRepository[PromptResponseRecentlyWatched]):
    """Repository for the per-profile watch history."""

    order_by = "watched_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptResponseRecentlyWatched)

    async def touch(self, profile_id: str, response_id: str) -> PromptResponseRecentlyWatched:
        """Record that a profile watched a response, bumping ``watched_at`` if already present."""
        stmt = select(PromptResponseRecentlyWatched).where(
            (PromptResponseRecentlyWatched.profile_id == profile_id)
            & (PromptResponseRecentlyWatched.prompt_response_id == response_id)
        )
        existing = await self._first(stmt)
        if existing is None:
            return await self.create(PromptResponseRecentlyWatched(profile_id=profile_id, prompt_response_id=response_id))
        existing.watched_at = utc_now()
        return await self.update(existing)

    async def list_recent(self, profile_id: str, limit: int = 20) -> List[PromptResponseRecentlyWatched]:
        stmt = (
            select(PromptResponseRecentlyWatched)
            .where(PromptResponseRecentlyWatched.profile_id == profile_id)
            .order_by(PromptResponseRecentlyWatched.watched_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return await self._all(stmt)
