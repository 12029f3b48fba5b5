"""
Database entity models.

This package contains all database entity models organized by business domain.
Each module represents either a single table or a small group of tables that
change together.

Modules:
- profiles: Profile, role membership and sharer/listener/executor links
- connections: Invitations and follow requests
- notifications: In-app notifications
- prompts: Topics (prompt categories), prompts, topic favourites and queue
- responses: Prompt responses, attachments, favourites and watch history
- videos: Hosted videos and their transcripts
"""

from .connections import FollowRequest, Invitation
from .notifications import Notification
from .profiles import Profile, ProfileExecutor, ProfileListener, ProfileRole, ProfileSharer
from .prompts import Prompt, PromptCategory, TopicFavorite, TopicQueueItem
from .responses import (
    PromptResponse,
    PromptResponseAttachment,
    PromptResponseFavorite,
    PromptResponseRecentlyWatched,
)
from .videos import Video, VideoTranscript

__all__ = [
    "FollowRequest",
    "Invitation",
    "Notification",
    "Profile",
    "ProfileExecutor",
    "ProfileListener",
    "ProfileRole",
    "ProfileSharer",
    "Prompt",
    "PromptCategory",
    "PromptResponse",
    "PromptResponseAttachment",
    "PromptResponseFavorite",
    "PromptResponseRecentlyWatched",
    "TopicFavorite",
    "TopicQueueItem",
    "Video",
    "VideoTranscript",
]
