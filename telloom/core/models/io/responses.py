"""
Prompt response, attachment and watch-history I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from telloom.core.models.domain.enums import PrivacyLevel


class PromptResponseUpsert(BaseModel):
    """Create or update the response of a sharer to a prompt."""

    prompt_id: str
    sharer_id: Optional[str] = Field(default=None, description="Sharer to answer for, when acting as executor")
    response_notes: Optional[str] = None
    privacy_level: Optional[PrivacyLevel] = None


class PromptResponseUpdate(BaseModel):
    response_notes: Optional[str] = None
    summary: Optional[str] = None
    privacy_level: Optional[PrivacyLevel] = None


class PromptResponseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    profile_sharer_id: str
    prompt_id: Optional[str] = None
    video_id: Optional[str] = None
    response_notes: Optional[str] = None
    summary: Optional[str] = None
    privacy_level: PrivacyLevel
    created_at: datetime
    updated_at: datetime


class AttachmentCreate(BaseModel):
    """Record a file that was already uploaded to the attachments bucket."""

    file_url: str = Field(min_length=1, description="Object path inside the attachments bucket")
    file_type: str = Field(min_length=1, max_length=128)
    file_name: str = Field(min_length=1, max_length=512)
    file_size: Optional[int] = Field(default=None, ge=0)
    title: Optional[str] = Field(default=None, max_length=256)
    description: Optional[str] = None
    date_captured: Optional[date] = None
    year_captured: Optional[int] = None


class AttachmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    prompt_response_id: str
    profile_sharer_id: str
    file_url: str
    file_type: str
    file_name: str
    file_size: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date_captured: Optional[date] = None
    year_captured: Optional[int] = None
    uploaded_at: datetime
    signed_url: Optional[str] = None


class FavoriteResult(BaseModel):
    prompt_response_id: str
    is_favorite: bool


class RecentlyWatchedItem(BaseModel):
    prompt_response_id: str
    watched_at: datetime
    response: Optional[PromptResponseRead] = None
