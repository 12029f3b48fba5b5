"""
Notification creation and message wording.

Notifications are a side effect of another write (an invitation, a follow
request, a connection change). Delivery is best-effort: a failure is logged
and rolled back without failing the request that triggered it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from telloom.core.database.entities.notifications import Notification
from telloom.core.database.entities.profiles import Profile
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import ConnectionChange, NotificationType, Role

logger = get_logger(__name__)


def _person(profile: Profile) -> Dict[str, Optional[str]]:
    return {"firstName": profile.first_name, "lastName": profile.last_name, "email": profile.email}


def follow_request_message(requestor: Profile) -> str:
    return f"{requestor.display_name} ({requestor.email}) has requested to follow you."


def invitation_message(invitee_email: str, role: Role) -> str:
    return f"You've invited {invitee_email} to be a {role.value.lower()}."


def invitation_sent_by_executor_message(executor_name: str, invitee_email: str, role: Role) -> str:
    return f"Executor ({executor_name}) sent an invitation to {invitee_email} for the role of {role.value.lower()}"


def connection_change_message(change: ConnectionChange, other: Profile) -> str:
    if change == ConnectionChange.ACCEPTED:
        return f"{other.display_name} accepted your invitation."
    if change == ConnectionChange.DECLINED:
        return f"{other.display_name} declined your invitation."
    return f"Your access to {other.display_name}'s content has been revoked."


async def create_notification(
    repos: TelloomRepoBundle,
    user_id: str,
    type: NotificationType,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Optional[Notification]:
    """Insert a notification for ``user_id``.

    Returns:
        The notification, or None when the insert failed (logged, not raised).
    """
    notification = Notification(user_id=user_id, type=type.value, message=message, data=data)
    try:
        # A failed insert only rolls back this savepoint
        async with repos.session.begin_nested():
            repos.session.add(notification)
        await repos.session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Failed to create {type.value} notification for {user_id}: {e}")
        return None
    logger.debug(f"Created {type.value} notification {notification.id} for {user_id}")
    return notification


async def notify_follow_request(repos: TelloomRepoBundle, sharer_profile_id: str, requestor: Profile) -> None:
    await create_notification(
        repos,
        sharer_profile_id,
        NotificationType.FOLLOW_REQUEST,
        follow_request_message(requestor),
        {"listener": _person(requestor), "role": Role.SHARER.value},
    )


async def notify_invitation(repos: TelloomRepoBundle, inviter_id: str, invitee_email: str, role: Role) -> None:
    await create_notification(
        repos,
        inviter_id,
        NotificationType.INVITATION,
        invitation_message(invitee_email, role),
        {"email": invitee_email, "role": Role.SHARER.value, "inviteeRole": role.value},
    )


async def notify_invitation_sent_by_executor(
    repos: TelloomRepoBundle,
    sharer_profile_id: str,
    executor: Profile,
    invitee_email: str,
    role: Role,
    token: str,
) -> None:
    await create_notification(
        repos,
        sharer_profile_id,
        NotificationType.INVITATION_SENT,
        invitation_sent_by_executor_message(executor.display_name, invitee_email, role),
        {"inviteeEmail": invitee_email, "role": role.value, "executorAction": True, "invitationToken": token},
    )


async def notify_connection_change(
    repos: TelloomRepoBundle,
    user_id: str,
    change: ConnectionChange,
    other: Profile,
    role: Role = Role.SHARER,
) -> None:
    """Tell ``user_id`` that ``other`` accepted, declined, or revoked a connection."""
    await create_notification(
        repos,
        user_id,
        NotificationType.CONNECTION_CHANGE,
        connection_change_message(change, other),
        {**_person(other), "changeType": change.value, "role": role.value},
    )
