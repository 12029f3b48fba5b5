"""
Repository layer for Telloom.

Data access is organized by aggregate; each repository wraps one table (or a
pair of same-shaped tables) and exposes the generic CRUD surface plus the
lookups the services need.
"""

from .base import AsyncBaseRepository, AsyncQueryBuilder, SQLModelRepository
from .bundle import TelloomRepoBundle, build_repos_from_session
from .follow_requests import FollowRequestRepository
from .invitations import InvitationRepository
from .notifications import NotificationRepository
from .profiles import (
    ProfileExecutorRepository,
    ProfileListenerRepository,
    ProfileRepository,
    ProfileRoleRepository,
    ProfileSharerRepository,
)
from .prompts import PromptCategoryRepository, PromptRepository, TopicFavoriteRepository, TopicQueueRepository
from .responses import (
    PromptResponseAttachmentRepository,
    PromptResponseFavoriteRepository,
    PromptResponseRepository,
    RecentlyWatchedRepository,
)
from .videos import VideoRepository, VideoTranscriptRepository

__all__ = [
    "AsyncBaseRepository",
    "AsyncQueryBuilder",
    "FollowRequestRepository",
    "InvitationRepository",
    "NotificationRepository",
    "ProfileExecutorRepository",
    "ProfileListenerRepository",
    "ProfileRepository",
    "ProfileRoleRepository",
    "ProfileSharerRepository",
    "PromptCategoryRepository",
    "PromptRepository",
    "PromptResponseAttachmentRepository",
    "PromptResponseFavoriteRepository",
    "PromptResponseRepository",
    "RecentlyWatchedRepository",
    "SQLModelRepository",
    "TelloomRepoBundle",
    "TopicFavoriteRepository",
    "TopicQueueRepository",
    "VideoRepository",
    "VideoTranscriptRepository",
    "build_repos_from_session",
]
