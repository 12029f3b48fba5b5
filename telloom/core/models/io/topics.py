"""
Topic (prompt category) and prompt I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from telloom.core.models.domain.enums import PrivacyLevel, VideoStatus


class TopicCreate(BaseModel):
    category: str = Field(min_length=1, max_length=256)
    description: Optional[str] = None
    theme: Optional[str] = Field(default=None, max_length=64)


class TopicUpdate(BaseModel):
    category: Optional[str] = Field(default=None, min_length=1, max_length=256)
    description: Optional[str] = None
    theme: Optional[str] = Field(default=None, max_length=64)


class TopicRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category: str
    description: Optional[str] = None
    theme: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PromptCreate(BaseModel):
    prompt_text: str = Field(min_length=1)
    prompt_type: Optional[str] = Field(default=None, max_length=64)
    is_context_establishing: bool = False
    is_object_prompt: bool = False
    prompt_category_id: Optional[str] = None


class PromptUpdate(BaseModel):
    prompt_text: Optional[str] = Field(default=None, min_length=1)
    prompt_type: Optional[str] = Field(default=None, max_length=64)
    is_context_establishing: Optional[bool] = None
    is_object_prompt: Optional[bool] = None
    prompt_category_id: Optional[str] = None


class PromptRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    prompt_text: str
    prompt_type: Optional[str] = None
    is_context_establishing: bool
    is_object_prompt: bool
    prompt_category_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TopicProgress(BaseModel):
    """Per-topic progress of a sharer and the caller's bookmarks."""

    id: str
    category: str
    description: Optional[str] = None
    theme: Optional[str] = None
    prompt_count: int
    completed_count: int
    is_favorite: bool
    is_in_queue: bool


class VideoSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    status: VideoStatus
    mux_playback_id: Optional[str] = None
    duration: Optional[float] = None
    aspect_ratio: Optional[str] = None


class PromptResponseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    video_id: Optional[str] = None
    response_notes: Optional[str] = None
    summary: Optional[str] = None
    privacy_level: PrivacyLevel
    updated_at: datetime


class PromptWithResponse(PromptRead):
    response: Optional[PromptResponseSummary] = None
    video: Optional[VideoSummary] = None


class TopicDetail(TopicRead):
    sharer_id: str
    prompts: List[PromptWithResponse]
    is_favorite: bool = False
    is_in_queue: bool = False


class BookmarkResult(BaseModel):
    topic_id: str
    kind: str
    active: bool
