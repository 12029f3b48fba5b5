"""
Follow Request Endpoints.

Any signed-in user can ask to follow a sharer. The sharer approves or
denies; approval makes the requestor a listener with access.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from telloom.core.database.entities.connections import FollowRequest
from telloom.core.database.entities.profiles import Profile
from telloom.core.models.domain.enums import FollowRequestStatus, Role
from telloom.core.models.io.connections import FollowRequestCreate, FollowRequestDetail, FollowRequestRead
from telloom.core.models.io.profiles import ProfileSummary
from telloom.server.services import connections as connection_service
from telloom.server.services import follow_requests as follow_service
from telloom.server.services.deps import CurrentProfileDep, LoopsClientDep, ReposDep, require_role

router = APIRouter()


def _detail(request: FollowRequest, people: Dict[str, Profile], owners: Dict[str, Profile]) -> FollowRequestDetail:
    requestor = people.get(request.requestor_id)
    sharer = owners.get(request.sharer_id)
    return FollowRequestDetail(
        **FollowRequestRead.model_validate(request).model_dump(),
        requestor=ProfileSummary.model_validate(requestor) if requestor is not None else None,
        sharer=ProfileSummary.model_validate(sharer) if sharer is not None else None,
    )


@router.post(
    "",
    response_model=FollowRequestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request To Follow",
    description="Ask a sharer for access to their stories.",
    responses={
        400: {"description": "Cannot follow yourself"},
        404: {"description": "Sharer not found"},
        409: {"description": "Request pending or already following"},
    },
)
async def create_follow_request(
    data: FollowRequestCreate, profile: CurrentProfileDep, repos: ReposDep, loops: LoopsClientDep
) -> FollowRequestRead:
    """
    Create a follow request.

    The sharer is notified in-app and by email. Email delivery is
    best-effort.
    """
    request = await follow_service.create_follow_request(repos, loops, profile, data.sharer_id)
    return FollowRequestRead.model_validate(request)


@router.get(
    "/received",
    response_model=List[FollowRequestDetail],
    summary="List Received Follow Requests",
    description="Follow requests sent to the caller's sharer, optionally filtered by status.",
)
async def list_received(
    repos: ReposDep,
    status_filter: Optional[FollowRequestStatus] = Query(default=None, alias="status"),
    profile: Profile = Depends(require_role(Role.SHARER)),
) -> List[FollowRequestDetail]:
    requests = await follow_service.list_received(repos, profile, status_filter)
    people = await connection_service.profiles_by_id(repos, [r.requestor_id for r in requests])
    owners = await connection_service.sharer_profiles(repos, [r.sharer_id for r in requests])
    return [_detail(r, people, owners) for r in requests]


@router.get(
    "/sent",
    response_model=List[FollowRequestDetail],
    summary="List Sent Follow Requests",
    description="Follow requests the caller has made.",
)
async def list_sent(profile: CurrentProfileDep, repos: ReposDep) -> List[FollowRequestDetail]:
    requests = await follow_service.list_sent(repos, profile)
    owners = await connection_service.sharer_profiles(repos, [r.sharer_id for r in requests])
    return [_detail(r, {profile.id: profile}, owners) for r in requests]


@router.post(
    "/{request_id}/approve",
    response_model=FollowRequestRead,
    summary="Approve Follow Request",
    description="Approve a pending request; the requestor becomes a listener with access.",
    responses={400: {"description": "Not pending"}, 403: {"description": "Not the sharer"}},
)
async def approve_follow_request(request_id: str, profile: CurrentProfileDep, repos: ReposDep) -> FollowRequestRead:
    request = await follow_service.approve_follow_request(repos, profile, request_id)
    return FollowRequestRead.model_validate(request)


@router.post(
    "/{request_id}/deny",
    response_model=FollowRequestRead,
    summary="Deny Follow Request",
    description="Deny a pending request.",
    responses={400: {"description": "Not pending"}, 403: {"description": "Not the sharer"}},
)
async def deny_follow_request(request_id: str, profile: CurrentProfileDep, repos: ReposDep) -> FollowRequestRead:
    request = await follow_service.deny_follow_request(repos, profile, request_id)
    return FollowRequestRead.model_validate(request)


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Withdraw Follow Request",
    description="Withdraw one of the caller's pending requests.",
)
async def withdraw_follow_request(request_id: str, profile: CurrentProfileDep, repos: ReposDep) -> Response:
    await follow_service.withdraw_follow_request(repos, profile, request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
