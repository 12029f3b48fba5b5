"""
Follow request workflow.

Any signed-in user may ask to follow a sharer. The sharer approves (which
creates the listener link and grants the LISTENER role) or denies.
"""

from __future__ import annotations

from typing import List, Optional

from telloom.core.database.base import utc_now
from telloom.core.database.entities.connections import FollowRequest
from telloom.core.database.entities.profiles import Profile, ProfileListener, ProfileSharer
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError, TelloomError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import ConnectionChange, FollowRequestStatus, Role
from telloom.integrations.errors import EmailApiError
from telloom.integrations.loops import LoopsClient, send_follow_request_email
from telloom.server.core.config import settings

from . import notifications
from .access import resolve_acting_sharer

logger = get_logger(__name__)


async def create_follow_request(
    repos: TelloomRepoBundle, loops: LoopsClient, profile: Profile, sharer_id: str
) -> FollowRequest:
    """Ask to follow a sharer; notifies and emails the sharer."""
    sharer = await repos.sharers.get_by_id(sharer_id)
    if sharer is None:
        raise NotFoundError("Sharer", sharer_id)
    if sharer.profile_id == profile.id:
        raise TelloomError("You cannot follow yourself")
    if await repos.follow_requests.get_for_pair(profile.id, sharer.id, FollowRequestStatus.PENDING) is not None:
        raise ConflictError("A follow request is already pending")
    if await repos.listeners.get_link(profile.id, sharer.id) is not None:
        raise ConflictError("You already follow this sharer")

    request = await repos.follow_requests.create(
        FollowRequest(requestor_id=profile.id, sharer_id=sharer.id, status=FollowRequestStatus.PENDING)
    )
    logger.info(f"Follow request {request.id} from {profile.id} to sharer {sharer.id}")

    await notifications.notify_follow_request(repos, sharer.profile_id, profile)
    sharer_profile = await repos.profiles.get_by_id(sharer.profile_id)
    if sharer_profile is not None and sharer_profile.email:
        try:
            await send_follow_request_email(
                loops,
                transactional_id=settings.loops.follow_request_template_id,
                sharer_email=sharer_profile.email,
                sharer_name=sharer_profile.first_name or sharer_profile.display_name,
                requestor_name=profile.display_name,
                requestor_email=profile.email or "",
                app_url=settings.app_url,
            )
        except EmailApiError as e:
            logger.error(f"Follow request email for {request.id} failed: {e}")
    return request


async def list_received(
    repos: TelloomRepoBundle, profile: Profile, status: Optional[FollowRequestStatus] = None
) -> List[FollowRequest]:
    ctx = await resolve_acting_sharer(repos, profile)
    return await repos.follow_requests.list_for_sharer(ctx.sharer.id, status)


async def list_sent(repos: TelloomRepoBundle, profile: Profile) -> List[FollowRequest]:
    return await repos.follow_requests.list_for_requestor(profile.id)


async def _owned_pending(repos: TelloomRepoBundle, profile: Profile, request_id: str) -> tuple[FollowRequest, ProfileSharer]:
    request = await repos.follow_requests.get_by_id(request_id)
    if request is None:
        raise NotFoundError("Follow request", request_id)
    sharer = await repos.sharers.get_by_id(request.sharer_id)
    if sharer is None or sharer.profile_id != profile.id:
        raise PermissionDeniedError("Not authorized to answer this follow request")
    if request.status != FollowRequestStatus.PENDING:
        raise InvalidStateError(f"Follow request is {FollowRequestStatus(request.status).value}, not PENDING")
    return request, sharer


async def approve_follow_request(repos: TelloomRepoBundle, profile: Profile, request_id: str) -> FollowRequest:
    """Approve a pending request: link the requestor as listener with access."""
    request, sharer = await _owned_pending(repos, profile, request_id)

    request.status = FollowRequestStatus.APPROVED
    request.approved_at = utc_now()
    request = await repos.follow_requests.update(request)

    link = await repos.listeners.get_link(request.requestor_id, sharer.id)
    if link is None:
        await repos.listeners.create(ProfileListener(listener_id=request.requestor_id, sharer_id=sharer.id, has_access=True))
    elif not link.has_access:
        link.has_access = True
        await repos.listeners.update(link)
    await repos.roles.ensure_role(request.requestor_id, Role.LISTENER)
    logger.info(f"Follow request {request.id} approved")

    await notifications.notify_connection_change(
        repos, request.requestor_id, ConnectionChange.ACCEPTED, profile, Role.LISTENER
    )
    return request


async def deny_follow_request(repos: TelloomRepoBundle, profile: Profile, request_id: str) -> FollowRequest:
    request, _ = await _owned_pending(repos, profile, request_id)

    request.status = FollowRequestStatus.DENIED
    request.denied_at = utc_now()
    request = await repos.follow_requests.update(request)
    logger.info(f"Follow request {request.id} denied")

    await notifications.notify_connection_change(
        repos, request.requestor_id, ConnectionChange.DECLINED, profile, Role.LISTENER
    )
    return request


async def withdraw_follow_request(repos: TelloomRepoBundle, profile: Profile, request_id: str) -> None:
    request = await repos.follow_requests.get_by_id(request_id)
    if request is None:
        raise NotFoundError("Follow request", request_id)
    if request.requestor_id != profile.id:
        raise PermissionDeniedError("Not authorized to withdraw this follow request")
    if request.status != FollowRequestStatus.PENDING:
        raise InvalidStateError("Only pending follow requests can be withdrawn")
    await repos.follow_requests.delete(request.id)
