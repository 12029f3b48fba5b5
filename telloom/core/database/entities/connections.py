"""
Connection workflow entity models.

Invitations and follow requests are the two ways a listener or executor gets
linked to a sharer. Both are plain status-column workflows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String
from sqlmodel import Field

from telloom.core.models.domain.enums import FollowRequestStatus, InvitationStatus, Role

from ..base import Base, UTCDateTime, new_id, utc_now


class Invitation(Base, table=True):
    """Entity for an emailed invitation to follow or manage a sharer.

    Table: invitations
    """

    __tablename__ = "invitations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    inviter_id: Optional[str] = Field(default=None, foreign_key="profiles.id", max_length=36)
    invitee_email: str = Field(max_length=320, index=True)
    role: Role = Field(sa_type=String(16))
    status: InvitationStatus = Field(default=InvitationStatus.PENDING, sa_type=String(16), index=True)
    token: str = Field(max_length=64, unique=True, index=True)

    # Only populated for executor invitations
    executor_first_name: Optional[str] = Field(default=None, max_length=128)
    executor_last_name: Optional[str] = Field(default=None, max_length=128)
    executor_phone: Optional[str] = Field(default=None, max_length=32)
    executor_relation: Optional[str] = Field(default=None, max_length=64)

    accepted_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Invitation(id={self.id}, role={self.role}, status={self.status})"


class FollowRequest(Base, table=True):
    """Entity for a listener's request to follow a sharer.

    Table: follow_requests
    """

    __tablename__ = "follow_requests"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    requestor_id: str = Field(foreign_key="profiles.id", max_length=36, index=True)
    sharer_id: str = Field(foreign_key="profile_sharers.id", max_length=36, index=True)
    status: FollowRequestStatus = Field(default=FollowRequestStatus.PENDING, sa_type=String(16), index=True)
    approved_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    denied_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"FollowRequest(id={self.id}, status={self.status})"
