"""
Video ingestion I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from telloom.core.models.domain.enums import VideoStatus


class UploadUrlRequest(BaseModel):
    prompt_id: str
    sharer_id: Optional[str] = Field(default=None, description="Sharer to upload for, when acting as executor")


class UploadUrlResponse(BaseModel):
    upload_url: str
    upload_id: str
    video_id: str


class VideoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    profile_sharer_id: str
    prompt_id: Optional[str] = None
    mux_upload_id: Optional[str] = None
    mux_asset_id: Optional[str] = None
    mux_playback_id: Optional[str] = None
    status: VideoStatus
    duration: Optional[float] = None
    aspect_ratio: Optional[str] = None
    video_quality: Optional[str] = None
    resolution_tier: Optional[str] = None
    max_width: Optional[int] = None
    max_height: Optional[int] = None
    max_frame_rate: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class DownloadResponse(BaseModel):
    video_id: str
    download_url: str
    quality: str


class WebhookAck(BaseModel):
    received: bool = True
    ignored: bool = False
    event_type: Optional[str] = None
