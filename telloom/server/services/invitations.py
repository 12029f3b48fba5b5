"""
Invitation workflow.

A sharer (or an executor on the sharer's behalf) invites someone by email
to become a listener or an executor. The invitee accepts with the token
from the email, which grants the role and creates the link row.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import List, Optional, Tuple

from telloom.core.database.base import utc_now
from telloom.core.database.entities.connections import Invitation
from telloom.core.database.entities.profiles import Profile, ProfileExecutor, ProfileListener
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError, TelloomError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import ConnectionChange, InvitationStatus, Role
from telloom.core.models.io.connections import InvitationCreate
from telloom.integrations.errors import EmailApiError
from telloom.integrations.loops import LoopsClient, send_invitation_email
from telloom.server.core.config import settings
from telloom.server.core.constant import ROLE_HOME_PATHS

from . import notifications
from .access import resolve_acting_sharer

logger = get_logger(__name__)

INVITABLE_ROLES = frozenset({Role.LISTENER, Role.EXECUTOR})


def _is_expired(invitation: Invitation, lifetime_days: int) -> bool:
    return invitation.created_at < utc_now() - timedelta(days=lifetime_days)


async def _sharer_profile(repos: TelloomRepoBundle, sharer_id: str) -> Optional[Profile]:
    sharer = await repos.sharers.get_by_id(sharer_id)
    if sharer is None:
        return None
    return await repos.profiles.get_by_id(sharer.profile_id)


async def _deliver_email(repos: TelloomRepoBundle, loops: LoopsClient, invitation: Invitation) -> None:
    sharer_profile = await _sharer_profile(repos, invitation.sharer_id)
    await send_invitation_email(
        loops,
        transactional_id=settings.loops.invitation_template_id,
        invitee_email=invitation.invitee_email,
        inviter_name=sharer_profile.display_name if sharer_profile else "Someone",
        inviter_email=(sharer_profile.email or "") if sharer_profile else "",
        role=Role(invitation.role).value,
        app_url=settings.app_url,
        token=invitation.token,
    )


async def send_invitation(
    repos: TelloomRepoBundle, loops: LoopsClient, profile: Profile, data: InvitationCreate
) -> Invitation:
    """Create a pending invitation and email it.

    Raises:
        TelloomError: The role cannot be invited (400).
        ConflictError: A pending invitation for the same sharer, email and role exists.
    """
    if data.role not in INVITABLE_ROLES:
        raise TelloomError("Invitations can only be sent for the LISTENER or EXECUTOR role")
    ctx = await resolve_acting_sharer(repos, profile, data.sharer_id)

    if await repos.invitations.find_pending(ctx.sharer.id, data.invitee_email, data.role) is not None:
        raise ConflictError("A pending invitation already exists for this email and role")

    executor_fields = {}
    if data.role == Role.EXECUTOR:
        executor_fields = {
            "executor_first_name": data.executor_first_name,
            "executor_last_name": data.executor_last_name,
            "executor_phone": data.executor_phone,
            "executor_relation": data.executor_relation,
        }
    invitation = await repos.invitations.create(
        Invitation(
            sharer_id=ctx.sharer.id,
            inviter_id=profile.id,
            invitee_email=data.invitee_email,
            role=data.role,
            status=InvitationStatus.PENDING,
            token=secrets.token_urlsafe(32),
            **executor_fields,
        )
    )
    logger.info(f"Invitation {invitation.id} created for sharer {ctx.sharer.id} as {data.role.value}")

    try:
        await _deliver_email(repos, loops, invitation)
    except EmailApiError as e:
        logger.error(f"Invitation email for {invitation.id} failed: {e}")

    if ctx.is_executor:
        await notifications.notify_invitation_sent_by_executor(
            repos, ctx.sharer.profile_id, profile, invitation.invitee_email, data.role, invitation.token
        )
    else:
        await notifications.notify_invitation(repos, profile.id, invitation.invitee_email, data.role)
    return invitation


async def _expire_if_stale(repos: TelloomRepoBundle, invitation: Invitation) -> None:
    if _is_expired(invitation, settings.invitation_lifetime_days):
        invitation.status = InvitationStatus.EXPIRED
        await repos.invitations.update(invitation)
        logger.info(f"Invitation {invitation.id} expired")
        raise NotFoundError("Invitation")


async def find_invitation(repos: TelloomRepoBundle, token: str) -> Tuple[Invitation, Optional[Profile]]:
    """Look up a pending invitation by token, with the sharer's profile.

    Invitations older than the configured lifetime are marked EXPIRED and
    reported as not found.
    """
    invitation = await repos.invitations.get_by_token(token, InvitationStatus.PENDING)
    if invitation is None:
        raise NotFoundError("Invitation")
    await _expire_if_stale(repos, invitation)
    return invitation, await _sharer_profile(repos, invitation.sharer_id)


async def accept_invitation(repos: TelloomRepoBundle, profile: Profile, token: str) -> Tuple[Invitation, Role, str]:
    """Accept an invitation addressed to the caller.

    Marks it ACCEPTED, grants the invited role and creates the listener or
    executor link when missing, then notifies the inviter.

    Returns:
        The invitation, the granted role and the dashboard path for it.
    """
    invitation = await repos.invitations.get_by_token(token, InvitationStatus.PENDING)
    if invitation is None:
        raise NotFoundError("Invitation")
    await _expire_if_stale(repos, invitation)

    if (invitation.invitee_email or "").lower() != (profile.email or "").lower():
        raise PermissionDeniedError("This invitation was sent to a different email address")

    role = Role(invitation.role)
    invitation.status = InvitationStatus.ACCEPTED
    invitation.accepted_at = utc_now()
    invitation = await repos.invitations.update(invitation)

    await repos.roles.ensure_role(profile.id, role)
    if role == Role.LISTENER:
        link = await repos.listeners.get_link(profile.id, invitation.sharer_id)
        if link is None:
            await repos.listeners.create(
                ProfileListener(listener_id=profile.id, sharer_id=invitation.sharer_id, has_access=True)
            )
        elif not link.has_access:
            link.has_access = True
            await repos.listeners.update(link)
    else:
        if await repos.executors.get_link(profile.id, invitation.sharer_id) is None:
            await repos.executors.create(ProfileExecutor(sharer_id=invitation.sharer_id, executor_id=profile.id))
    logger.info(f"Invitation {invitation.id} accepted by {profile.id}")

    notify_id = invitation.inviter_id
    if notify_id is None:
        sharer = await repos.sharers.get_by_id(invitation.sharer_id)
        notify_id = sharer.profile_id if sharer else None
    if notify_id is not None:
        await notifications.notify_connection_change(repos, notify_id, ConnectionChange.ACCEPTED, profile, role)
    return invitation, role, ROLE_HOME_PATHS[role]


async def decline_invitation(repos: TelloomRepoBundle, profile: Profile, invitation_id: Optional[str]) -> Invitation:
    if not invitation_id:
        raise TelloomError("Invitation ID is required")
    invitation = await repos.invitations.get_by_id(invitation_id)
    if (
        invitation is None
        or invitation.status != InvitationStatus.PENDING
        or (invitation.invitee_email or "").lower() != (profile.email or "").lower()
    ):
        raise NotFoundError("Invitation", invitation_id)

    invitation.status = InvitationStatus.DECLINED
    invitation = await repos.invitations.update(invitation)
    logger.info(f"Invitation {invitation.id} declined by {profile.id}")

    if invitation.inviter_id:
        await notifications.notify_connection_change(
            repos, invitation.inviter_id, ConnectionChange.DECLINED, profile, Role(invitation.role)
        )
    return invitation


async def list_sent(repos: TelloomRepoBundle, profile: Profile, sharer_id: Optional[str] = None) -> List[Invitation]:
    ctx = await resolve_acting_sharer(repos, profile, sharer_id)
    return await repos.invitations.list_for_sharer(ctx.sharer.id)


async def list_received(repos: TelloomRepoBundle, profile: Profile) -> List[Invitation]:
    if not profile.email:
        return []
    return await repos.invitations.list_pending_for_email(profile.email)


async def _managed_pending(repos: TelloomRepoBundle, profile: Profile, invitation_id: str) -> Invitation:
    invitation = await repos.invitations.get_by_id(invitation_id)
    if invitation is None:
        raise NotFoundError("Invitation", invitation_id)
    await resolve_acting_sharer(repos, profile, invitation.sharer_id)
    if invitation.status != InvitationStatus.PENDING:
        raise InvalidStateError(f"Invitation is {InvitationStatus(invitation.status).value}, not PENDING")
    return invitation


async def resend_invitation(repos: TelloomRepoBundle, loops: LoopsClient, profile: Profile, invitation_id: str) -> Invitation:
    """Send the email of a pending invitation again. Email failures propagate."""
    invitation = await _managed_pending(repos, profile, invitation_id)
    await _deliver_email(repos, loops, invitation)
    return await repos.invitations.update(invitation)


async def cancel_invitation(repos: TelloomRepoBundle, profile: Profile, invitation_id: str) -> None:
    invitation = await _managed_pending(repos, profile, invitation_id)
    await repos.invitations.delete(invitation.id)
    logger.info(f"Invitation {invitation.id} cancelled by {profile.id}")
