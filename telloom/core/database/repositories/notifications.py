"""
Notification repository.

Data access for in-app notifications, including the bulk read-state updates
used by the notification centre.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.notifications import Notification
from .base import SQLModelRepository


class NotificationRepository(SQLModelRepository[Notification]):
    """Repository for notification data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[Notification]:
        """Get a user's notifications, newest first.

        Args:
            user_id: Profile id the notifications are addressed to
            limit: Maximum number of rows

        Returns:
            List of Notification instances
        """
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._all(stmt)

    async def count_unread(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(Notification).where(
            (Notification.user_id == user_id) & (Notification.is_read == False)  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return int(result.one())

    async def mark_read(self, user_id: str, notification_ids: List[str]) -> int:
        """Mark the given notifications of a user as read.

        Ids that belong to other users are ignored.

        Returns:
            Number of rows updated
        """
        if not notification_ids:
            return 0
        stmt = (
            update(Notification)
            .where((Notification.user_id == user_id) & (Notification.id.in_(notification_ids)))  # type: ignore[attr-defined]
            .values(is_read=True, updated_at=utc_now())
        )
        result = await self.session.exec(stmt)  # type: ignore[call-overload]
        await self.session.commit()
        return result.rowcount

    async def mark_all_read(self, user_id: str) -> int:
        stmt = (
            update(Notification)
            .where((Notification.user_id == user_id) & (Notification.is_read == False))  # noqa: E712
            .values(is_read=True, updated_at=utc_now())
        )
        result = await self.session.exec(stmt)  # type: ignore[call-overload]
        await self.session.commit()
        return result.rowcount
