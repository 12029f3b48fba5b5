"""
Notification entity model.

In-app notifications addressed to a profile. ``data`` carries a free-form JSON
payload the front end uses to render actions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, new_id, utc_now


class Notification(Base, table=True):
    """Entity for an in-app notification.

    Table: notifications
    """

    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    type: str = Field(max_length=32, index=True)
    message: str = Field(sa_type=Text)
    data: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, type={self.type}, is_read={self.is_read})"
