"""
Profile and role services.

Role enrolment, selection of the active role and profile maintenance.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from telloom.core.database.entities.profiles import Profile, ProfileSharer
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import ConflictError, PermissionDeniedError, TelloomError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import Role
from telloom.core.models.io.profiles import ProfileCreate, ProfileUpdate
from telloom.integrations.auth_client import AuthUser
from telloom.server.core.constant import ROLE_HOME_PATHS, SELF_SERVICE_ROLES

logger = get_logger(__name__)


def _full_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    return " ".join(part for part in (first_name, last_name) if part) or None


async def create_profile(repos: TelloomRepoBundle, user: AuthUser, data: ProfileCreate) -> Profile:
    """Create the profile row of a freshly signed-up user."""
    if await repos.profiles.get_by_id(user.id) is not None:
        raise ConflictError("Profile already exists")
    first_name = data.first_name or user.user_metadata.get("firstName")
    last_name = data.last_name or user.user_metadata.get("lastName")
    profile = Profile(
        id=user.id,
        email=user.email,
        first_name=first_name,
        last_name=last_name,
        full_name=_full_name(first_name, last_name),
        username=data.username,
        phone=data.phone,
        avatar_url=data.avatar_url,
    )
    profile = await repos.profiles.create(profile)
    logger.info(f"Created profile {profile.id}")
    return profile


async def update_profile(repos: TelloomRepoBundle, profile: Profile, data: ProfileUpdate) -> Profile:
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    if "first_name" in changes or "last_name" in changes:
        profile.full_name = _full_name(profile.first_name, profile.last_name)
    return await repos.profiles.update(profile)


async def enroll_role(repos: TelloomRepoBundle, profile: Profile, role: Role) -> List[Role]:
    """Grant the caller a self-service role.

    Only LISTENER and SHARER can be taken without an invitation. Becoming a
    sharer also creates the sharer record content hangs off.

    Returns:
        The caller's roles after enrolment.
    """
    if role not in SELF_SERVICE_ROLES:
        raise TelloomError("Invalid role")
    if await repos.roles.has_role(profile.id, role):
        raise ConflictError(f"Profile already has the {role.value} role")

    await repos.roles.ensure_role(profile.id, role)
    if role == Role.SHARER and await repos.sharers.get_by_profile_id(profile.id) is None:
        await repos.sharers.create(ProfileSharer(profile_id=profile.id, subscription_status=False))
    logger.info(f"Profile {profile.id} enrolled as {role.value}")
    return await repos.roles.list_roles(profile.id)


async def select_role(repos: TelloomRepoBundle, profile: Profile, role: Role) -> str:
    """Validate the caller holds ``role``; returns the dashboard path for it."""
    if not await repos.roles.has_role(profile.id, role):
        raise PermissionDeniedError(f"Profile does not have the {role.value} role")
    return ROLE_HOME_PATHS[role]


async def current_roles(
    repos: TelloomRepoBundle, profile: Profile, cookie_role: Optional[str]
) -> Tuple[List[Role], Optional[Role], Optional[str]]:
    """Roles of the caller, the active role from the cookie and the caller's sharer id.

    The active role is dropped when the cookie names a role the caller no longer holds.
    """
    roles = await repos.roles.list_roles(profile.id)
    active: Optional[Role] = None
    if cookie_role in {r.value for r in roles}:
        active = Role(cookie_role)
    sharer = await repos.sharers.get_by_profile_id(profile.id)
    return roles, active, sharer.id if sharer else None
