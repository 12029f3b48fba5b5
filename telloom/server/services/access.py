"""
Acting-for-a-sharer resolution and visibility checks.

Most content belongs to a sharer. The caller may be that sharer, one of the
sharer's executors (managing content on their behalf), or a listener with
access (read only).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from telloom.core.database.entities.profiles import Profile, ProfileSharer
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import NotFoundError, PermissionDeniedError
from telloom.core.models.domain.enums import Role


@dataclass(frozen=True)
class ActingContext:
    """Who is acting, for which sharer, and under which role."""

    profile: Profile
    sharer: ProfileSharer
    role: Role

    @property
    def is_executor(self) -> bool:
        return self.role == Role.EXECUTOR


async def resolve_acting_sharer(
    repos: TelloomRepoBundle, profile: Profile, sharer_id: Optional[str] = None
) -> ActingContext:
    """Resolve the sharer the caller manages in this request.

    Without ``sharer_id`` the caller acts as their own sharer. With it, the
    caller must own that sharer or hold an executor link to it.

    Raises:
        NotFoundError: The sharer does not exist, or the caller has no sharer of their own.
        PermissionDeniedError: The caller neither owns nor manages the sharer.
    """
    if sharer_id is None:
        own = await repos.sharers.get_by_profile_id(profile.id)
        if own is None:
            raise NotFoundError("Sharer profile")
        return ActingContext(profile=profile, sharer=own, role=Role.SHARER)

    sharer = await repos.sharers.get_by_id(sharer_id)
    if sharer is None:
        raise NotFoundError("Sharer", sharer_id)
    if sharer.profile_id == profile.id:
        return ActingContext(profile=profile, sharer=sharer, role=Role.SHARER)
    if await repos.executors.get_link(profile.id, sharer.id) is not None:
        return ActingContext(profile=profile, sharer=sharer, role=Role.EXECUTOR)
    raise PermissionDeniedError("Not authorized to act for this sharer")


async def can_view_sharer(repos: TelloomRepoBundle, profile: Profile, sharer: ProfileSharer) -> bool:
    """Whether the caller may read the sharer's content."""
    if sharer.profile_id == profile.id or profile.is_admin:
        return True
    if await repos.executors.get_link(profile.id, sharer.id) is not None:
        return True
    link = await repos.listeners.get_link(profile.id, sharer.id)
    return link is not None and link.has_access


async def get_viewable_sharer(repos: TelloomRepoBundle, profile: Profile, sharer_id: str) -> ProfileSharer:
    sharer = await repos.sharers.get_by_id(sharer_id)
    if sharer is None:
        raise NotFoundError("Sharer", sharer_id)
    if not await can_view_sharer(repos, profile, sharer):
        raise PermissionDeniedError("Not authorized to view this sharer")
    return sharer
