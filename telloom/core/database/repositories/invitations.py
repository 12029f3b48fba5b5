"""
Invitation repository.

Data access for invitations a sharer (or an executor on their behalf) sends
to prospective listeners and executors.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from telloom.core.models.domain.enums import InvitationStatus, Role

from ..entities.connections import Invitation
from .base import SQLModelRepository


class InvitationRepository(SQLModelRepository[Invitation]):
    """Repository for invitation data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Invitation)

    async def get_by_token(self, token: str, status: Optional[InvitationStatus] = None) -> Optional[Invitation]:
        """Get an invitation by its token.

        Args:
            token: Opaque token embedded in the invitation link
            status: When given, only match invitations in this status

        Returns:
            Invitation instance or None
        """
        stmt = select(Invitation).where(Invitation.token == token)
        if status is not None:
            stmt = stmt.where(Invitation.status == status.value)
        return await self._first(stmt)

    async def find_pending(self, sharer_id: str, email: str, role: Role) -> Optional[Invitation]:
        """Get the pending invitation for a sharer, email and role, if any."""
        stmt = select(Invitation).where(
            (Invitation.sharer_id == sharer_id)
            & (func.lower(Invitation.invitee_email) == email.strip().lower())
            & (Invitation.role == role.value)
            & (Invitation.status == InvitationStatus.PENDING.value)
        )
        return await self._first(stmt)

    async def list_for_sharer(self, sharer_id: str) -> List[Invitation]:
        stmt = (
            select(Invitation)
            .where(Invitation.sharer_id == sharer_id)
            .order_by(Invitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def list_pending_for_email(self, email: str) -> List[Invitation]:
        """Get pending invitations addressed to an email, newest first."""
        stmt = (
            select(Invitation)
            .where(
                (func.lower(Invitation.invitee_email) == email.strip().lower())
                & (Invitation.status == InvitationStatus.PENDING.value)
            )
            .order_by(Invitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)
