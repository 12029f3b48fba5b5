"""
Follow request repository.

Data access for requests a listener makes to follow a sharer.
"""

from __future__ import annotations

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from telloom.core.models.domain.enums import FollowRequestStatus

from ..entities.connections import FollowRequest
from .base import SQLModelRepository


class FollowRequestRepository(SQLModelRepository[FollowRequest]):
    """Repository for follow request data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FollowRequest)

    async def get_for_pair(
        self, requestor_id: str, sharer_id: str, status: FollowRequestStatus
    ) -> Optional[FollowRequest]:
        """Get the request between a requestor and a sharer in a given status.

        Args:
            requestor_id: Profile id of the requesting user
            sharer_id: ProfileSharer id being followed
            status: Status to match

        Returns:
            Most recent matching FollowRequest or None
        """
        stmt = (
            select(FollowRequest)
            .where(
                (FollowRequest.requestor_id == requestor_id)
                & (FollowRequest.sharer_id == sharer_id)
                & (FollowRequest.status == status.value)
            )
            .order_by(FollowRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._first(stmt)

    async def list_for_sharer(self, sharer_id: str, status: Optional[FollowRequestStatus] = None) -> List[FollowRequest]:
        stmt = select(FollowRequest).where(FollowRequest.sharer_id == sharer_id)
        if status is not None:
            stmt = stmt.where(FollowRequest.status == status.value)
        stmt = stmt.order_by(FollowRequest.created_at.desc())  # type: ignore[attr-defined]
        return await self._all(stmt)

    async def list_for_requestor(self, requestor_id: str) -> List[FollowRequest]:
        stmt = (
            select(FollowRequest)
            .where(FollowRequest.requestor_id == requestor_id)
            .order_by(FollowRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)
