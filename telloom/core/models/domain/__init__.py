"""Domain-level enums."""

from .enums import (
    ConnectionChange,
    FollowRequestStatus,
    InvitationStatus,
    NotificationType,
    PrivacyLevel,
    Role,
    VideoStatus,
)

__all__ = [
    "ConnectionChange",
    "FollowRequestStatus",
    "InvitationStatus",
    "NotificationType",
    "PrivacyLevel",
    "Role",
    "VideoStatus",
]
