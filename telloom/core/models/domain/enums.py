"""Domain enums shared by entities, services and API schemas."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """
    Roles a profile can hold.

    A profile may hold several roles at once; the one used for a browser
    session is the "active role" chosen on the select-role screen.
    """

    SHARER = "SHARER"  # Records and owns stories.
    LISTENER = "LISTENER"  # Watches a sharer's stories.
    EXECUTOR = "EXECUTOR"  # Manages a sharer's content on their behalf.
    ADMIN = "ADMIN"  # Manages the prompt catalogue.


class InvitationStatus(str, Enum):
    """Lifecycle of an invitation."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    EXPIRED = "EXPIRED"


class FollowRequestStatus(str, Enum):
    """Lifecycle of a listener's request to follow a sharer."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    REVOKED = "REVOKED"


class VideoStatus(str, Enum):
    """
    Processing state of an uploaded video.

    Videos move WAITING -> PREPARING -> READY as the hosted pipeline reports
    progress. ERRORED is terminal for a given upload.
    """

    WAITING = "WAITING"
    PREPARING = "PREPARING"
    ASSET_CREATED = "ASSET_CREATED"
    READY = "READY"
    ERRORED = "ERRORED"


class NotificationType(str, Enum):
    """Kinds of in-app notifications."""

    FOLLOW_REQUEST = "FOLLOW_REQUEST"
    INVITATION = "INVITATION"
    INVITATION_SENT = "INVITATION_SENT"
    CONNECTION_CHANGE = "CONNECTION_CHANGE"
    TOPIC_RESPONSE = "TOPIC_RESPONSE"
    TOPIC_COMMENT = "TOPIC_COMMENT"


class ConnectionChange(str, Enum):
    """Kinds of connection change reported to the other party."""

    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    REVOKED = "REVOKED"


class PrivacyLevel(str, Enum):
    """Visibility of a prompt response."""

    PRIVATE = "Private"
    PUBLIC = "Public"
