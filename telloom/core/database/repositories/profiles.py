"""
Profile and role-link repositories.

Data access for profiles, their role memberships and the three link tables
that connect a sharer to listeners and executors.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from telloom.core.models.domain.enums import Role

from ..entities.profiles import Profile, ProfileExecutor, ProfileListener, ProfileRole, ProfileSharer
from .base import SQLModelRepository


class ProfileRepository(SQLModelRepository[Profile]):
    """Repository for profile rows."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Profile)

    async def get_by_email(self, email: str) -> Optional[Profile]:
        """Get a profile by email, ignoring case.

        Args:
            email: Email address to look up

        Returns:
            Profile instance or None
        """
        stmt = select(Profile).where(func.lower(Profile.email) == email.strip().lower())
        return await self._first(stmt)

    async def get_many(self, profile_ids: List[str]) -> List[Profile]:
        if not profile_ids:
            return []
        stmt = select(Profile).where(Profile.id.in_(profile_ids))  # type: ignore[attr-defined]
        return await self._all(stmt)


class ProfileRoleRepository(SQLModelRepository[ProfileRole]):
    """Repository for role memberships of profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProfileRole)

    async def list_roles(self, profile_id: str) -> List[Role]:
        """Get the roles a profile holds, in enrolment order."""
        stmt = select(ProfileRole).where(ProfileRole.profile_id == profile_id).order_by(ProfileRole.created_at)
        return [Role(row.role) for row in await self._all(stmt)]

    async def get_membership(self, profile_id: str, role: Role) -> Optional[ProfileRole]:
        stmt = select(ProfileRole).where((ProfileRole.profile_id == profile_id) & (ProfileRole.role == role.value))
        return await self._first(stmt)

    async def has_role(self, profile_id: str, role: Role) -> bool:
        return await self.get_membership(profile_id, role) is not None

    async def ensure_role(self, profile_id: str, role: Role) -> ProfileRole:
        """Insert the membership row unless it already exists.

        Args:
            profile_id: Profile receiving the role
            role: Role to grant

        Returns:
            The existing or newly created membership
        """
        existing = await self.get_membership(profile_id, role)
        if existing is not None:
            return existing
        return await self.create(ProfileRole(profile_id=profile_id, role=role))


class ProfileSharerRepository(SQLModelRepository[ProfileSharer]):
    """Repository for sharer records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProfileSharer)

    async def get_by_profile_id(self, profile_id: str) -> Optional[ProfileSharer]:
        stmt = select(ProfileSharer).where(ProfileSharer.profile_id == profile_id)
        return await self._first(stmt)


class ProfileListenerRepository(SQLModelRepository[ProfileListener]):
    """Repository for listener-to-sharer links."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProfileListener)

    async def get_link(self, listener_id: str, sharer_id: str) -> Optional[ProfileListener]:
        """Get the link between a listener profile and a sharer.

        Args:
            listener_id: Listener profile id
            sharer_id: ProfileSharer id

        Returns:
            ProfileListener instance or None
        """
        stmt = select(ProfileListener).where(
            (ProfileListener.listener_id == listener_id) & (ProfileListener.sharer_id == sharer_id)
        )
        return await self._first(stmt)

    async def list_for_sharer(self, sharer_id: str) -> List[ProfileListener]:
        stmt = (
            select(ProfileListener)
            .where(ProfileListener.sharer_id == sharer_id)
            .order_by(ProfileListener.shared_since.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def list_for_listener(self, listener_id: str) -> List[ProfileListener]:
        stmt = (
            select(ProfileListener)
            .where(ProfileListener.listener_id == listener_id)
            .order_by(ProfileListener.shared_since.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)


class ProfileExecutorRepository(SQLModelRepository[ProfileExecutor]):
    """Repository for executor-to-sharer links."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProfileExecutor)

    async def get_link(self, executor_id: str, sharer_id: str) -> Optional[ProfileExecutor]:
        stmt = select(ProfileExecutor).where(
            (ProfileExecutor.executor_id == executor_id) & (ProfileExecutor.sharer_id == sharer_id)
        )
        return await self._first(stmt)

    async def list_for_sharer(self, sharer_id: str) -> List[ProfileExecutor]:
        stmt = select(ProfileExecutor).where(ProfileExecutor.sharer_id == sharer_id).order_by(ProfileExecutor.created_at)
        return await self._all(stmt)

    async def list_for_executor(self, executor_id: str) -> List[ProfileExecutor]:
        stmt = (
            select(ProfileExecutor)
            .where(ProfileExecutor.executor_id == executor_id)
            .order_by(ProfileExecutor.created_at)
        )
        return await self._all(stmt)
