"""
Profile Endpoints.

The profile row shares its id with the auth user. It is created once during
onboarding and then edited by its owner.
"""

from fastapi import APIRouter, status

from telloom.core.models.io.profiles import ProfileCreate, ProfileRead, ProfileUpdate
from telloom.server.services import profiles as profile_service
from telloom.server.services.deps import CurrentProfileDep, CurrentUserDep, ReposDep

router = APIRouter()


@router.post(
    "",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Profile",
    description="Create the profile of the signed-in user.",
    response_description="The created profile.",
    responses={409: {"description": "Profile already exists"}},
)
async def create_profile(data: ProfileCreate, user: CurrentUserDep, repos: ReposDep) -> ProfileRead:
    """
    Create the caller's profile.

    The id and email come from the session. Missing names fall back to the
    ``firstName`` / ``lastName`` given at sign-up.
    """
    profile = await profile_service.create_profile(repos, user, data)
    return ProfileRead.model_validate(profile)


@router.get(
    "/me",
    response_model=ProfileRead,
    summary="Get My Profile",
    description="Retrieve the profile of the signed-in user.",
    responses={404: {"description": "Profile not created yet"}},
)
async def get_my_profile(profile: CurrentProfileDep) -> ProfileRead:
    return ProfileRead.model_validate(profile)


@router.patch(
    "/me",
    response_model=ProfileRead,
    summary="Update My Profile",
    description="Partially update the profile of the signed-in user.",
)
async def update_my_profile(data: ProfileUpdate, profile: CurrentProfileDep, repos: ReposDep) -> ProfileRead:
    """
    Update the caller's profile.

    Only fields present in the body change. ``full_name`` is recomputed
    from the first and last name.
    """
    profile = await profile_service.update_profile(repos, profile, data)
    return ProfileRead.model_validate(profile)
