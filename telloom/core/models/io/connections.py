"""
Invitation, follow request and connection I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from telloom.core.models.domain.enums import FollowRequestStatus, InvitationStatus, Role

from .profiles import ProfileSummary


class InvitationCreate(BaseModel):
    """Schema for sending an invitation."""

    invitee_email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=320)
    role: Role = Field(description="LISTENER or EXECUTOR")
    sharer_id: Optional[str] = Field(default=None, description="Sharer to invite for, when acting as executor")
    executor_first_name: Optional[str] = Field(default=None, max_length=128)
    executor_last_name: Optional[str] = Field(default=None, max_length=128)
    executor_phone: Optional[str] = Field(default=None, max_length=32)
    executor_relation: Optional[str] = Field(default=None, max_length=64)

    @field_validator("invitee_email", mode="before")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower() if isinstance(value, str) else value


class InvitationRead(BaseModel):
    """Schema for reading an invitation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    sharer_id: str
    inviter_id: Optional[str] = None
    invitee_email: str
    role: Role
    status: InvitationStatus
    token: str
    executor_first_name: Optional[str] = None
    executor_last_name: Optional[str] = None
    executor_phone: Optional[str] = None
    executor_relation: Optional[str] = None
    accepted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class InvitationDetail(InvitationRead):
    """An invitation together with the sharer it connects to."""

    sharer: Optional[ProfileSummary] = None
    sharer_name: str = "Someone"


class InvitationAcceptRequest(BaseModel):
    token: str = Field(min_length=1)


class InvitationDeclineRequest(BaseModel):
    invitation_id: Optional[str] = None


class InvitationAcceptResponse(BaseModel):
    invitation: InvitationRead
    role: Role
    redirect_to: str


class FollowRequestCreate(BaseModel):
    sharer_id: str = Field(description="ProfileSharer id to follow")


class FollowRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    requestor_id: str
    sharer_id: str
    status: FollowRequestStatus
    approved_at: Optional[datetime] = None
    denied_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class FollowRequestDetail(FollowRequestRead):
    requestor: Optional[ProfileSummary] = None
    sharer: Optional[ProfileSummary] = None


class ListenerConnection(BaseModel):
    """A listener of the caller's sharer."""

    id: str
    listener: ProfileSummary
    shared_since: datetime
    has_access: bool
    last_viewed: Optional[datetime] = None
    notifications: bool


class ExecutorConnection(BaseModel):
    """An executor managing the caller's sharer."""

    id: str
    executor: ProfileSummary
    created_at: datetime


class SharerConnections(BaseModel):
    sharer_id: str
    listeners: List[ListenerConnection]
    executors: List[ExecutorConnection]


class FollowedSharer(BaseModel):
    """A sharer the caller listens to."""

    id: str
    sharer_id: str
    sharer: ProfileSummary
    has_access: bool
    notifications: bool
    shared_since: datetime
    last_viewed: Optional[datetime] = None


class ManagedSharer(BaseModel):
    """A sharer the caller manages as executor."""

    id: str
    sharer_id: str
    sharer: ProfileSummary
    created_at: datetime


class ListenerAccessUpdate(BaseModel):
    has_access: bool


class ListenerNotificationsUpdate(BaseModel):
    notifications: bool
