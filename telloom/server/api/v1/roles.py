"""
Role Endpoints.

A profile can hold several roles. Self-service enrolment covers SHARER and
LISTENER; EXECUTOR is granted by accepting an invitation. The role chosen
for the session is kept in the ``activeRole`` cookie.
"""

from typing import Optional

from fastapi import APIRouter, Cookie, Response, status

from telloom.core.models.io.profiles import MyRolesResponse, RoleRequest, RoleSelectResponse
from telloom.server.core.config import settings
from telloom.server.core.constant import ACTIVE_ROLE_COOKIE
from telloom.server.services import profiles as profile_service
from telloom.server.services.deps import CurrentProfileDep, ReposDep

router = APIRouter()

ACTIVE_ROLE_MAX_AGE = 60 * 60 * 24 * 30


@router.get(
    "/me",
    response_model=MyRolesResponse,
    summary="Get My Roles",
    description="List the caller's roles and the active role from the session cookie.",
)
async def get_my_roles(
    profile: CurrentProfileDep,
    repos: ReposDep,
    active_role: Optional[str] = Cookie(default=None, alias=ACTIVE_ROLE_COOKIE),
) -> MyRolesResponse:
    """
    Get the caller's roles.

    ``active_role`` is null when the cookie is missing or names a role the
    profile no longer holds.
    """
    roles, active, sharer_id = await profile_service.current_roles(repos, profile, active_role)
    return MyRolesResponse(roles=roles, active_role=active, sharer_id=sharer_id)


@router.post(
    "",
    response_model=MyRolesResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enrol In Role",
    description="Take the SHARER or LISTENER role.",
    responses={400: {"description": "Role cannot be self-assigned"}, 409: {"description": "Role already held"}},
)
async def enroll_role(body: RoleRequest, profile: CurrentProfileDep, repos: ReposDep) -> MyRolesResponse:
    """
    Enrol the caller in a role.

    Becoming a SHARER also creates the sharer record that content hangs off.
    """
    roles = await profile_service.enroll_role(repos, profile, body.role)
    sharer = await repos.sharers.get_by_profile_id(profile.id)
    return MyRolesResponse(roles=roles, sharer_id=sharer.id if sharer is not None else None)


@router.post(
    "/select",
    response_model=RoleSelectResponse,
    summary="Select Active Role",
    description="Choose the role for this session and get the dashboard to open.",
    responses={403: {"description": "Profile does not hold the role"}},
)
async def select_role(
    body: RoleRequest, response: Response, profile: CurrentProfileDep, repos: ReposDep
) -> RoleSelectResponse:
    """
    Select the active role.

    Sets the ``activeRole`` cookie and returns the dashboard path of the role.
    """
    redirect_to = await profile_service.select_role(repos, profile, body.role)
    response.set_cookie(
        ACTIVE_ROLE_COOKIE,
        body.role.value,
        max_age=ACTIVE_ROLE_MAX_AGE,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )
    return RoleSelectResponse(role=body.role, redirect_to=redirect_to)


@router.delete(
    "/select",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear Active Role",
    description="Forget the active role of this session.",
)
async def clear_role() -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(ACTIVE_ROLE_COOKIE, path="/", httponly=True, secure=settings.secure_cookies, samesite="lax")
    return response
