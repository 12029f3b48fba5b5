"""
Video entity models.

A video row is created before the upload starts and is then advanced by the
video pipeline's webhooks. ``passthrough`` is the JSON string attached to the
upload so webhooks can be traced back to the row.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String
from sqlmodel import Field, Text

from telloom.core.models.domain.enums import VideoStatus

from ..base import Base, UTCDateTime, new_id, utc_now


class Video(Base, table=True):
    """Entity for a hosted video.

    Table: videos
    """

    __tablename__ = "videos"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    prompt_id: Optional[str] = Field(default=None, foreign_key="prompts.id", max_length=36, index=True)

    mux_upload_id: Optional[str] = Field(default=None, max_length=128, unique=True, index=True)
    mux_asset_id: Optional[str] = Field(default=None, max_length=128, index=True)
    mux_playback_id: Optional[str] = Field(default=None, max_length=128)
    passthrough: Optional[str] = Field(default=None, sa_type=Text)
    status: VideoStatus = Field(default=VideoStatus.WAITING, sa_type=String(16), index=True)

    duration: Optional[float] = Field(default=None)
    aspect_ratio: Optional[str] = Field(default=None, max_length=16)
    video_quality: Optional[str] = Field(default=None, max_length=32)
    resolution_tier: Optional[str] = Field(default=None, max_length=16)
    max_width: Optional[int] = Field(default=None)
    max_height: Optional[int] = Field(default=None)
    max_frame_rate: Optional[float] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Video(id={self.id}, status={self.status}, upload={self.mux_upload_id})"


class VideoTranscript(Base, table=True):
    """Entity for a generated text track of a video.

    Table: video_transcripts
    """

    __tablename__ = "video_transcripts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    video_id: str = Field(foreign_key="videos.id", max_length=36, index=True)
    transcript: str = Field(default="", sa_type=Text)
    language: Optional[str] = Field(default=None, max_length=16)
    name: Optional[str] = Field(default=None, max_length=128)
    mux_asset_id: Optional[str] = Field(default=None, max_length=128)
    mux_track_id: Optional[str] = Field(default=None, max_length=128, unique=True)
    source: Optional[str] = Field(default=None, max_length=32)
    type: Optional[str] = Field(default=None, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})
