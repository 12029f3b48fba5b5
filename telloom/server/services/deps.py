"""
Request dependencies.

Provides the repository bundle, the external service clients and the
identity of the caller to API endpoints. External clients are process-wide
singletons built from settings; tests override them via
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Awaitable, Callable, Optional

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from telloom.core.database import get_session
from telloom.core.database.entities.profiles import Profile
from telloom.core.database.repositories import TelloomRepoBundle, build_repos_from_session
from telloom.core.errors import AuthenticationError, NotFoundError, PermissionDeniedError
from telloom.core.models.domain.enums import Role
from telloom.integrations.auth_client import AuthClient, AuthUser
from telloom.integrations.loops import LoopsClient
from telloom.integrations.mux.client import MuxClient
from telloom.integrations.storage import StorageClient
from telloom.server.core.config import settings
from telloom.server.core.constant import ACCESS_TOKEN_COOKIE


async def get_repos(session: AsyncSession = Depends(get_session)) -> TelloomRepoBundle:
    return build_repos_from_session(session=session)


@lru_cache
def get_auth_client() -> AuthClient:
    return AuthClient(settings.supabase.url, api_key=settings.supabase.anon_key)


@lru_cache
def get_mux_client() -> MuxClient:
    mux = settings.mux
    return MuxClient(mux.base_url, token_id=mux.token_id, token_secret=mux.token_secret)


@lru_cache
def get_loops_client() -> LoopsClient:
    return LoopsClient(settings.loops.base_url, api_key=settings.loops.api_key)


@lru_cache
def get_storage_client() -> StorageClient:
    return StorageClient(settings.supabase.url, service_key=settings.supabase.service_role_key)


def extract_access_token(request: Request) -> Optional[str]:
    """Find the session token: ``Authorization: Bearer`` first, then the session cookie."""
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


async def get_current_user(
    request: Request,
    auth_client: AuthClient = Depends(get_auth_client),
) -> AuthUser:
    """Resolve the signed-in user, raising 401 when there is no valid session."""
    token = extract_access_token(request)
    if not token:
        raise AuthenticationError("Unauthorized")
    return await auth_client.get_user(token)


ReposDep = Annotated[TelloomRepoBundle, Depends(get_repos)]
CurrentUserDep = Annotated[AuthUser, Depends(get_current_user)]


async def get_current_profile(user: CurrentUserDep, repos: ReposDep) -> Profile:
    """Load the caller's profile; its id equals the auth user id."""
    profile = await repos.profiles.get_by_id(user.id)
    if profile is None:
        raise NotFoundError("Profile", user.id)
    return profile


CurrentProfileDep = Annotated[Profile, Depends(get_current_profile)]


def require_role(role: Role) -> Callable[..., Awaitable[Profile]]:
    """Build a dependency that only lets through profiles holding ``role``."""

    async def _require_role(profile: CurrentProfileDep, repos: ReposDep) -> Profile:
        if role == Role.ADMIN and profile.is_admin:
            return profile
        if not await repos.roles.has_role(profile.id, role):
            raise PermissionDeniedError(f"{role.value} role required")
        return profile

    return _require_role


MuxClientDep = Annotated[MuxClient, Depends(get_mux_client)]
LoopsClientDep = Annotated[LoopsClient, Depends(get_loops_client)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
