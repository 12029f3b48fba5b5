"""
Invitation Endpoints.

A sharer (or an executor acting for one) invites someone by email to become
a listener or an executor. The invitee follows the emailed link, looks the
invitation up by token and accepts or declines it.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from telloom.core.models.io.connections import (
    InvitationAcceptRequest,
    InvitationAcceptResponse,
    InvitationCreate,
    InvitationDeclineRequest,
    InvitationDetail,
    InvitationRead,
)
from telloom.core.models.io.profiles import ProfileSummary
from telloom.server.services import invitations as invitation_service
from telloom.server.services.deps import CurrentProfileDep, LoopsClientDep, ReposDep

router = APIRouter()


@router.post(
    "",
    response_model=InvitationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Invitation",
    description="Invite an email address to become a listener or executor of a sharer.",
    response_description="The pending invitation.",
    responses={
        400: {"description": "Role cannot be invited"},
        403: {"description": "Caller does not manage the sharer"},
        409: {"description": "A pending invitation already exists"},
    },
)
async def send_invitation(
    data: InvitationCreate, profile: CurrentProfileDep, repos: ReposDep, loops: LoopsClientDep
) -> InvitationRead:
    """
    Send an invitation.

    Without ``sharer_id`` the caller invites for their own sharer. With it,
    the caller must be an executor of that sharer. The email is sent on a
    best-effort basis: a delivery failure does not undo the invitation.
    """
    invitation = await invitation_service.send_invitation(repos, loops, profile, data)
    return InvitationRead.model_validate(invitation)


@router.get(
    "/find",
    response_model=InvitationDetail,
    summary="Find Invitation By Token",
    description="Look up a pending invitation from the token in the emailed link. No session required.",
    responses={404: {"description": "No pending invitation for this token, or it expired"}},
)
async def find_invitation(repos: ReposDep, token: str = Query(min_length=1)) -> InvitationDetail:
    """
    Find an invitation.

    Returns the invitation with the name of the sharer who sent it. An
    invitation past its lifetime is marked EXPIRED and reported as missing.
    """
    invitation, sharer_profile = await invitation_service.find_invitation(repos, token)
    return InvitationDetail(
        **InvitationRead.model_validate(invitation).model_dump(),
        sharer=ProfileSummary.model_validate(sharer_profile) if sharer_profile is not None else None,
        sharer_name=sharer_profile.display_name if sharer_profile is not None else "Someone",
    )


@router.post(
    "/accept",
    response_model=InvitationAcceptResponse,
    summary="Accept Invitation",
    description="Accept an invitation addressed to the caller's email.",
    responses={403: {"description": "Invitation was sent to another email"}, 404: {"description": "Not pending"}},
)
async def accept_invitation(
    body: InvitationAcceptRequest, profile: CurrentProfileDep, repos: ReposDep
) -> InvitationAcceptResponse:
    """
    Accept an invitation.

    Grants the invited role, links the caller to the sharer and tells the
    inviter. ``redirect_to`` is the dashboard of the granted role.
    """
    invitation, role, redirect_to = await invitation_service.accept_invitation(repos, profile, body.token)
    return InvitationAcceptResponse(
        invitation=InvitationRead.model_validate(invitation), role=role, redirect_to=redirect_to
    )


@router.post(
    "/decline",
    response_model=InvitationRead,
    summary="Decline Invitation",
    description="Decline an invitation addressed to the caller's email.",
    responses={400: {"description": "Invitation ID is required"}, 404: {"description": "Not pending"}},
)
async def decline_invitation(
    body: InvitationDeclineRequest, profile: CurrentProfileDep, repos: ReposDep
) -> InvitationRead:
    invitation = await invitation_service.decline_invitation(repos, profile, body.invitation_id)
    return InvitationRead.model_validate(invitation)


@router.get(
    "/sent",
    response_model=List[InvitationRead],
    summary="List Sent Invitations",
    description="Invitations of the caller's sharer, or of a managed sharer with ``sharer_id``.",
)
async def list_sent(
    profile: CurrentProfileDep, repos: ReposDep, sharer_id: Optional[str] = None
) -> List[InvitationRead]:
    invitations = await invitation_service.list_sent(repos, profile, sharer_id)
    return [InvitationRead.model_validate(i) for i in invitations]


@router.get(
    "/received",
    response_model=List[InvitationRead],
    summary="List Received Invitations",
    description="Pending invitations addressed to the caller's email.",
)
async def list_received(profile: CurrentProfileDep, repos: ReposDep) -> List[InvitationRead]:
    invitations = await invitation_service.list_received(repos, profile)
    return [InvitationRead.model_validate(i) for i in invitations]


@router.post(
    "/{invitation_id}/resend",
    response_model=InvitationRead,
    summary="Resend Invitation",
    description="Send the email of a pending invitation again.",
    responses={400: {"description": "Not pending"}, 502: {"description": "Email delivery failed"}},
)
async def resend_invitation(
    invitation_id: str, profile: CurrentProfileDep, repos: ReposDep, loops: LoopsClientDep
) -> InvitationRead:
    invitation = await invitation_service.resend_invitation(repos, loops, profile, invitation_id)
    return InvitationRead.model_validate(invitation)


@router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel Invitation",
    description="Withdraw a pending invitation.",
    responses={400: {"description": "Not pending"}, 404: {"description": "Invitation not found"}},
)
async def cancel_invitation(invitation_id: str, profile: CurrentProfileDep, repos: ReposDep) -> Response:
    await invitation_service.cancel_invitation(repos, profile, invitation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
