"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances sharing
one session, so a request handler works against a single unit of work.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel.ext.asyncio.session import AsyncSession

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


@dataclass(frozen=True)
class TelloomRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    session: AsyncSession
    profiles: ProfileRepository
    roles: ProfileRoleRepository
    sharers: ProfileSharerRepository
    listeners: ProfileListenerRepository
    executors: ProfileExecutorRepository
    invitations: InvitationRepository
    follow_requests: FollowRequestRepository
    notifications: NotificationRepository
    topics: PromptCategoryRepository
    prompts: PromptRepository
    topic_favorites: TopicFavoriteRepository
    topic_queue: TopicQueueRepository
    responses: PromptResponseRepository
    attachments: PromptResponseAttachmentRepository
    response_favorites: PromptResponseFavoriteRepository
    recently_watched: RecentlyWatchedRepository
    videos: VideoRepository
    transcripts: VideoTranscriptRepository


def build_repos_from_session(*, session: AsyncSession) -> TelloomRepoBundle:
    """Build a TelloomRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return TelloomRepoBundle(
        session=session,
        profiles=ProfileRepository(session),
        roles=ProfileRoleRepository(session),
        sharers=ProfileSharerRepository(session),
        listeners=ProfileListenerRepository(session),
        executors=ProfileExecutorRepository(session),
        invitations=InvitationRepository(session),
        follow_requests=FollowRequestRepository(session),
        notifications=NotificationRepository(session),
        topics=PromptCategoryRepository(session),
        prompts=PromptRepository(session),
        topic_favorites=TopicFavoriteRepository(session),
        topic_queue=TopicQueueRepository(session),
        responses=PromptResponseRepository(session),
        attachments=PromptResponseAttachmentRepository(session),
        response_favorites=PromptResponseFavoriteRepository(session),
        recently_watched=RecentlyWatchedRepository(session),
        videos=VideoRepository(session),
        transcripts=VideoTranscriptRepository(session),
    )
