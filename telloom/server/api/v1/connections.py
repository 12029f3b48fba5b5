"""
Connection Endpoints.

Three views of the same links: the sharer managing listeners and
executors, the listener looking at sharers they follow, and the executor
looking at sharers they manage.
"""

from typing import List

from fastapi import APIRouter, Response, status

from telloom.core.database.entities.profiles import ProfileListener
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.models.io.connections import (
    FollowedSharer,
    ListenerAccessUpdate,
    ListenerConnection,
    ListenerNotificationsUpdate,
    ManagedSharer,
    SharerConnections,
)
from telloom.server.services import connections as connection_service
from telloom.server.services.deps import CurrentProfileDep, ReposDep

router = APIRouter()


@router.get(
    "/sharer",
    response_model=SharerConnections,
    summary="List My Listeners And Executors",
    description="Listeners and executors of the caller's sharer with profile summaries.",
    responses={404: {"description": "Caller is not a sharer"}},
)
async def get_sharer_connections(profile: CurrentProfileDep, repos: ReposDep) -> SharerConnections:
    return await connection_service.sharer_connections(repos, profile)


@router.patch(
    "/listeners/{link_id}",
    response_model=ListenerConnection,
    summary="Set Listener Access",
    description="Revoke or restore a listener's access. Revoking notifies the listener.",
    responses={404: {"description": "Listener not connected to the caller's sharer"}},
)
async def set_listener_access(
    link_id: str, body: ListenerAccessUpdate, profile: CurrentProfileDep, repos: ReposDep
) -> ListenerConnection:
    """
    Change a listener's access.

    The link stays in place, so access can be restored later without a new
    follow request.
    """
    link = await connection_service.set_listener_access(repos, profile, link_id, body.has_access)
    people = await connection_service.profiles_by_id(repos, [link.listener_id])
    return connection_service.listener_connection(link, people)


@router.delete(
    "/listeners/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Listener",
    description="Remove a listener. Their approved follow request is marked REVOKED.",
)
async def remove_listener(link_id: str, profile: CurrentProfileDep, repos: ReposDep) -> Response:
    await connection_service.remove_listener(repos, profile, link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/executors/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Executor",
    description="Remove an executor from the caller's sharer.",
)
async def remove_executor(link_id: str, profile: CurrentProfileDep, repos: ReposDep) -> Response:
    await connection_service.remove_executor(repos, profile, link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/listener",
    response_model=List[FollowedSharer],
    summary="List Followed Sharers",
    description="Sharers the caller follows, with the access flag.",
)
async def list_followed_sharers(profile: CurrentProfileDep, repos: ReposDep) -> List[FollowedSharer]:
    return await connection_service.followed_sharers(repos, profile)


@router.patch(
    "/listener/{link_id}",
    response_model=FollowedSharer,
    summary="Set Listener Notifications",
    description="Turn notifications about a followed sharer on or off.",
)
async def set_listener_notifications(
    link_id: str, body: ListenerNotificationsUpdate, profile: CurrentProfileDep, repos: ReposDep
) -> FollowedSharer:
    link = await connection_service.set_listener_notifications(repos, profile, link_id, body.notifications)
    return await _followed(repos, link)


@router.get(
    "/executor",
    response_model=List[ManagedSharer],
    summary="List Managed Sharers",
    description="Sharers the caller manages as executor.",
)
async def list_managed_sharers(profile: CurrentProfileDep, repos: ReposDep) -> List[ManagedSharer]:
    return await connection_service.managed_sharers(repos, profile)


async def _followed(repos: TelloomRepoBundle, link: ProfileListener) -> FollowedSharer:
    owners = await connection_service.sharer_profiles(repos, [link.sharer_id])
    return connection_service.followed_sharer(link, owners)
