"""
Notification Endpoints.

In-app notifications addressed to the caller, newest first.
"""

from typing import Any, Dict, List, Union

from fastapi import APIRouter, Body, Query, Response, status

from telloom.core.errors import NotFoundError, TelloomError
from telloom.core.models.io.notifications import MarkReadResult, NotificationRead, UnreadCount
from telloom.server.services.deps import CurrentProfileDep, ReposDep

router = APIRouter()


@router.get(
    "",
    response_model=Union[List[NotificationRead], UnreadCount],
    summary="List Notifications",
    description="The caller's notifications, newest first. With ``count=true`` only the unread count.",
)
async def list_notifications(
    profile: CurrentProfileDep,
    repos: ReposDep,
    count: bool = Query(default=False, description="Return only ``{unread_count}``"),
    limit: int = Query(default=50, ge=1, le=200),
) -> Union[List[NotificationRead], UnreadCount]:
    if count:
        return UnreadCount(unread_count=await repos.notifications.count_unread(profile.id))
    notifications = await repos.notifications.list_for_user(profile.id, limit)
    return [NotificationRead.model_validate(n) for n in notifications]


@router.patch(
    "",
    response_model=MarkReadResult,
    summary="Mark Notifications Read",
    description="Mark the listed notifications of the caller as read.",
    responses={400: {"description": "``ids`` is not a list"}},
)
async def mark_notifications_read(
    profile: CurrentProfileDep, repos: ReposDep, body: Dict[str, Any] = Body(...)
) -> MarkReadResult:
    """
    Mark notifications as read.

    The body is ``{"ids": [...]}``. Ids of other users' notifications are
    silently skipped.
    """
    ids = body.get("ids")
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise TelloomError("ids must be a list of notification ids")
    return MarkReadResult(updated=await repos.notifications.mark_read(profile.id, ids))


@router.post(
    "/mark-all-read",
    response_model=MarkReadResult,
    summary="Mark All Notifications Read",
)
async def mark_all_read(profile: CurrentProfileDep, repos: ReposDep) -> MarkReadResult:
    return MarkReadResult(updated=await repos.notifications.mark_all_read(profile.id))


@router.post(
    "/{notification_id}/mark-read",
    response_model=MarkReadResult,
    summary="Mark Notification Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: str, profile: CurrentProfileDep, repos: ReposDep) -> MarkReadResult:
    updated = await repos.notifications.mark_read(profile.id, [notification_id])
    if not updated:
        raise NotFoundError("Notification", notification_id)
    return MarkReadResult(updated=updated)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(notification_id: str, profile: CurrentProfileDep, repos: ReposDep) -> Response:
    notification = await repos.notifications.get_by_id(notification_id)
    if notification is None or notification.user_id != profile.id:
        raise NotFoundError("Notification", notification_id)
    await repos.notifications.delete(notification.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
