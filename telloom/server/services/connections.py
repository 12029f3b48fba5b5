"""
Connection management between sharers, listeners and executors.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from telloom.core.database.entities.profiles import Profile, ProfileExecutor, ProfileListener
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import NotFoundError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import ConnectionChange, FollowRequestStatus, Role
from telloom.core.models.io.connections import (
    ExecutorConnection,
    FollowedSharer,
    ListenerConnection,
    ManagedSharer,
    SharerConnections,
)
from telloom.core.models.io.profiles import ProfileSummary

from . import notifications
from .access import resolve_acting_sharer

logger = get_logger(__name__)


async def profiles_by_id(repos: TelloomRepoBundle, profile_ids: Iterable[str]) -> Dict[str, Profile]:
    return {p.id: p for p in await repos.profiles.get_many(list(set(profile_ids)))}


async def sharer_profiles(repos: TelloomRepoBundle, sharer_ids: Iterable[str]) -> Dict[str, Profile]:
    """Map ProfileSharer ids to the profiles that own them."""
    owners: Dict[str, str] = {}
    for sharer_id in set(sharer_ids):
        sharer = await repos.sharers.get_by_id(sharer_id)
        if sharer is not None:
            owners[sharer_id] = sharer.profile_id
    profiles = await profiles_by_id(repos, owners.values())
    return {sharer_id: profiles[pid] for sharer_id, pid in owners.items() if pid in profiles}


def _summary(profile: Profile | None, fallback_id: str) -> ProfileSummary:
    if profile is None:
        return ProfileSummary(id=fallback_id)
    return ProfileSummary.model_validate(profile)


def listener_connection(link: ProfileListener, people: Dict[str, Profile]) -> ListenerConnection:
    return ListenerConnection(
        id=link.id,
        listener=_summary(people.get(link.listener_id), link.listener_id),
        shared_since=link.shared_since,
        has_access=link.has_access,
        last_viewed=link.last_viewed,
        notifications=link.notifications,
    )


async def sharer_connections(repos: TelloomRepoBundle, profile: Profile) -> SharerConnections:
    ctx = await resolve_acting_sharer(repos, profile)
    listeners = await repos.listeners.list_for_sharer(ctx.sharer.id)
    executors = await repos.executors.list_for_sharer(ctx.sharer.id)
    people = await profiles_by_id(repos, [l.listener_id for l in listeners] + [e.executor_id for e in executors])
    return SharerConnections(
        sharer_id=ctx.sharer.id,
        listeners=[listener_connection(link, people) for link in listeners],
        executors=[
            ExecutorConnection(
                id=link.id,
                executor=_summary(people.get(link.executor_id), link.executor_id),
                created_at=link.created_at,
            )
            for link in executors
        ],
    )


async def _own_listener_link(repos: TelloomRepoBundle, profile: Profile, link_id: str) -> ProfileListener:
    ctx = await resolve_acting_sharer(repos, profile)
    link = await repos.listeners.get_by_id(link_id)
    if link is None or link.sharer_id != ctx.sharer.id:
        raise NotFoundError("Listener connection", link_id)
    return link


async def set_listener_access(repos: TelloomRepoBundle, profile: Profile, link_id: str, has_access: bool) -> ProfileListener:
    """Revoke or restore a listener's access; revoking notifies the listener."""
    link = await _own_listener_link(repos, profile, link_id)
    revoking = link.has_access and not has_access
    link.has_access = has_access
    link = await repos.listeners.update(link)
    logger.info(f"Listener link {link.id} access set to {has_access}")
    if revoking:
        await notifications.notify_connection_change(
            repos, link.listener_id, ConnectionChange.REVOKED, profile, Role.LISTENER
        )
    return link


async def remove_listener(repos: TelloomRepoBundle, profile: Profile, link_id: str) -> None:
    """Delete a listener link and mark the approved follow request for the pair REVOKED."""
    link = await _own_listener_link(repos, profile, link_id)
    approved = await repos.follow_requests.get_for_pair(link.listener_id, link.sharer_id, FollowRequestStatus.APPROVED)
    await repos.listeners.delete(link.id)
    if approved is not None:
        approved.status = FollowRequestStatus.REVOKED
        await repos.follow_requests.update(approved)
    logger.info(f"Listener link {link_id} removed")


async def remove_executor(repos: TelloomRepoBundle, profile: Profile, link_id: str) -> None:
    ctx = await resolve_acting_sharer(repos, profile)
    link: ProfileExecutor | None = await repos.executors.get_by_id(link_id)
    if link is None or link.sharer_id != ctx.sharer.id:
        raise NotFoundError("Executor connection", link_id)
    # bookmarks made through the link reference it
    await repos.topic_favorites.delete_where(executor_id=link.id)
    await repos.topic_queue.delete_where(executor_id=link.id)
    await repos.executors.delete(link.id)
    logger.info(f"Executor link {link_id} removed")


def followed_sharer(link: ProfileListener, owners: Dict[str, Profile]) -> FollowedSharer:
    return FollowedSharer(
        id=link.id,
        sharer_id=link.sharer_id,
        sharer=_summary(owners.get(link.sharer_id), link.sharer_id),
        has_access=link.has_access,
        notifications=link.notifications,
        shared_since=link.shared_since,
        last_viewed=link.last_viewed,
    )


async def followed_sharers(repos: TelloomRepoBundle, profile: Profile) -> List[FollowedSharer]:
    links = await repos.listeners.list_for_listener(profile.id)
    owners = await sharer_profiles(repos, [l.sharer_id for l in links])
    return [followed_sharer(link, owners) for link in links]


async def set_listener_notifications(
    repos: TelloomRepoBundle, profile: Profile, link_id: str, enabled: bool
) -> ProfileListener:
    link = await repos.listeners.get_by_id(link_id)
    if link is None or link.listener_id != profile.id:
        raise NotFoundError("Listener connection", link_id)
    link.notifications = enabled
    return await repos.listeners.update(link)


async def managed_sharers(repos: TelloomRepoBundle, profile: Profile) -> List[ManagedSharer]:
    links = await repos.executors.list_for_executor(profile.id)
    owners = await sharer_profiles(repos, [l.sharer_id for l in links])
    return [
        ManagedSharer(
            id=link.id,
            sharer_id=link.sharer_id,
            sharer=_summary(owners.get(link.sharer_id), link.sharer_id),
            created_at=link.created_at,
        )
        for link in links
    ]
