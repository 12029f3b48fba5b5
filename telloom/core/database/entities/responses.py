"""
Prompt response entity models.

A prompt response is a sharer's answer to a prompt: an optional video, notes,
attachments, and the per-viewer favourite and watch-history rows.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlmodel import Field, Text

from telloom.core.models.domain.enums import PrivacyLevel

from ..base import Base, UTCDateTime, new_id, utc_now


class PromptResponse(Base, table=True):
    """Entity for a sharer's response to a prompt.

    Table: prompt_responses
    """

    __tablename__ = "prompt_responses"
    __table_args__ = (UniqueConstraint("profile_sharer_id", "prompt_id", name="uq_prompt_responses_sharer_prompt"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    prompt_id: Optional[str] = Field(default=None, foreign_key="prompts.id", max_length=36, index=True)
    video_id: Optional[str] = Field(default=None, foreign_key="videos.id", max_length=36)
    response_notes: Optional[str] = Field(default=None, sa_type=Text)
    summary: Optional[str] = Field(default=None, sa_type=Text)
    privacy_level: PrivacyLevel = Field(default=PrivacyLevel.PRIVATE, sa_type=String(16))
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"PromptResponse(id={self.id}, prompt_id={self.prompt_id}, video_id={self.video_id})"


class PromptResponseAttachment(Base, table=True):
    """Entity for a file attached to a prompt response.

    ``file_url`` holds the storage object path inside the attachments bucket;
    clients receive short-lived signed URLs instead.

    Table: prompt_response_attachments
    """

    __tablename__ = "prompt_response_attachments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    prompt_response_id: str = Field(foreign_key="prompt_responses.id", max_length=36, index=True)
    profile_sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    file_url: str = Field(sa_type=Text)
    file_type: str = Field(max_length=128)
    file_name: str = Field(max_length=512)
    file_size: Optional[int] = Field(default=None)
    title: Optional[str] = Field(default=None, max_length=256)
    description: Optional[str] = Field(default=None, sa_type=Text)
    date_captured: Optional[date] = Field(default=None)
    year_captured: Optional[int] = Field(default=None)
    uploaded_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class PromptResponseFavorite(Base, table=True):
    """Table: prompt_response_favorites"""

    __tablename__ = "prompt_response_favorites"
    __table_args__ = (UniqueConstraint("profile_id", "prompt_response_id", name="uq_prompt_response_favorites_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    prompt_response_id: str = Field(foreign_key="prompt_responses.id", max_length=36, index=True)
    favorited_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class PromptResponseRecentlyWatched(Base, table=True):
    """Table: prompt_response_recently_watched"""

    __tablename__ = "prompt_response_recently_watched"
    __table_args__ = (UniqueConstraint("profile_id", "prompt_response_id", name="uq_recently_watched_pair"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    prompt_response_id: str = Field(foreign_key="prompt_responses.id", max_length=36, index=True)
    watched_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
