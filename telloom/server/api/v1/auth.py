"""
Auth Endpoints.

Exposes the signed-in user as seen by the hosted auth provider, together
with the Telloom profile and roles attached to it.
"""

from fastapi import APIRouter

from telloom.core.models.io.profiles import AuthUserRead, ProfileRead
from telloom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter()


@router.get(
    "/user",
    response_model=AuthUserRead,
    summary="Get Signed-in User",
    description="Return the auth user with their profile and roles.",
    response_description="The auth user, profile (null before onboarding) and roles.",
    responses={401: {"description": "No valid session"}},
)
async def get_auth_user(user: CurrentUserDep, repos: ReposDep) -> AuthUserRead:
    """
    Get the signed-in user.

    The profile is null and the role list empty until the user completes
    onboarding by creating their profile.
    """
    profile = await repos.profiles.get_by_id(user.id)
    roles = await repos.roles.list_roles(user.id) if profile is not None else []
    return AuthUserRead(
        id=user.id,
        email=user.email,
        user_metadata=user.user_metadata,
        profile=ProfileRead.model_validate(profile) if profile is not None else None,
        roles=roles,
    )
