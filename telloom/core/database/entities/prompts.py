"""
Prompt catalogue and per-profile topic state.

Prompts are grouped into categories, which the product calls "topics".
Favourites and the "queue" are per-profile bookmarks on topics, scoped by the
role they were made under (an executor bookmarks on behalf of a sharer).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, new_id, utc_now


class PromptCategory(Base, table=True):
    """Entity for a topic grouping prompts.

    Table: prompt_categories
    """

    __tablename__ = "prompt_categories"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    category: str = Field(max_length=256, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    theme: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class Prompt(Base, table=True):
    """Entity for a single storytelling prompt.

    Table: prompts
    """

    __tablename__ = "prompts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    prompt_text: str = Field(sa_type=Text)
    prompt_type: Optional[str] = Field(default=None, max_length=64)
    is_context_establishing: bool = Field(default=False)
    is_object_prompt: bool = Field(default=False)
    prompt_category_id: Optional[str] = Field(
        default=None, foreign_key="prompt_categories.id", max_length=36, index=True
    )
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class TopicFavorite(Base, table=True):
    """Entity bookmarking a topic as a favourite.

    Table: topic_favorites
    """

    __tablename__ = "topic_favorites"
    __table_args__ = (
        UniqueConstraint("profile_id", "prompt_category_id", "role", "sharer_id", name="uq_topic_favorites_scope"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    prompt_category_id: str = Field(foreign_key="prompt_categories.id", max_length=36, index=True)
    role: Optional[str] = Field(default=None, max_length=16)
    sharer_id: Optional[str] = Field(default=None, foreign_key="profile_sharers.id", max_length=36)
    executor_id: Optional[str] = Field(default=None, foreign_key="profile_executors.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class TopicQueueItem(Base, table=True):
    """Entity placing a topic in a profile's "to answer" queue.

    Table: topic_queue_items
    """

    __tablename__ = "topic_queue_items"
    __table_args__ = (
        UniqueConstraint("profile_id", "prompt_category_id", "role", "sharer_id", name="uq_topic_queue_items_scope"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    profile_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    prompt_category_id: str = Field(foreign_key="prompt_categories.id", max_length=36, index=True)
    role: Optional[str] = Field(default=None, max_length=16)
    sharer_id: Optional[str] = Field(default=None, foreign_key="profile_sharers.id", max_length=36)
    executor_id: Optional[str] = Field(default=None, foreign_key="profile_executors.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
