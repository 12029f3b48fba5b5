"""
Video and transcript repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from telloom.core.models.domain.enums import VideoStatus

from ..entities.videos import Video, VideoTranscript
from .base import SQLModelRepository


class VideoRepository(SQLModelRepository[Video]):
    """Repository for video data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Video)

    async def get_by_upload_id(self, upload_id: str) -> Optional[Video]:
        """Get a video by the direct-upload id returned from the video API."""
        stmt = select(Video).where(Video.mux_upload_id == upload_id)
        return await self._first(stmt)

    async def get_by_asset_id(self, asset_id: str) -> Optional[Video]:
        stmt = select(Video).where(Video.mux_asset_id == asset_id)
        return await self._first(stmt)

    async def get_active_for_prompt(self, sharer_id: str, prompt_id: str) -> Optional[Video]:
        """Get a video for a sharer's prompt that is not in the ERRORED state.

        Args:
            sharer_id: ProfileSharer id
            prompt_id: Prompt id

        Returns:
            Most recent non-errored Video or None
        """
        stmt = (
            select(Video)
            .where(
                (Video.profile_sharer_id == sharer_id)
                & (Video.prompt_id == prompt_id)
                & (Video.status != VideoStatus.ERRORED.value)
            )
            .order_by(Video.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._first(stmt)

    async def get_many(self, video_ids: List[str]) -> List[Video]:
        if not video_ids:
            return []
        stmt = select(Video).where(Video.id.in_(video_ids))  # type: ignore[attr-defined]
        return await self._all(stmt)


class VideoTranscriptRepository(SQLModelRepository[VideoTranscript]):
    """Repository for video transcripts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VideoTranscript)

    async def get_by_track_id(self, track_id: str) -> Optional[VideoTranscript]:
        stmt = select(VideoTranscript).where(VideoTranscript.mux_track_id == track_id)
        return await self._first(stmt)

    async def list_for_video(self, video_id: str) -> List[VideoTranscript]:
        stmt = select(VideoTranscript).where(VideoTranscript.video_id == video_id).order_by(VideoTranscript.created_at)
        return await self._all(stmt)
