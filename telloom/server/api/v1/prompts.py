"""
Prompt Endpoints.

Prompts are the questions a sharer answers on video. Reads are open to any
signed-in user; writes need the ADMIN role.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from telloom.core.database.entities.profiles import Profile
from telloom.core.models.domain.enums import Role
from telloom.core.models.io.topics import PromptCreate, PromptRead, PromptUpdate
from telloom.server.services import topics as topic_service
from telloom.server.services.deps import CurrentUserDep, ReposDep, require_role

router = APIRouter()

AdminDep = Depends(require_role(Role.ADMIN))


@router.get(
    "",
    response_model=List[PromptRead],
    summary="List Prompts",
    description="All prompts, or the prompts of one topic with ``topic_id``.",
)
async def list_prompts(_user: CurrentUserDep, repos: ReposDep, topic_id: Optional[str] = None) -> List[PromptRead]:
    return [PromptRead.model_validate(p) for p in await topic_service.list_prompts(repos, topic_id)]


@router.get("/{prompt_id}", response_model=PromptRead, summary="Get Prompt")
async def get_prompt(prompt_id: str, _user: CurrentUserDep, repos: ReposDep) -> PromptRead:
    return PromptRead.model_validate(await topic_service.get_prompt(repos, prompt_id))


@router.post(
    "",
    response_model=PromptRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Prompt",
    responses={403: {"description": "Admin role required"}, 404: {"description": "Topic not found"}},
)
async def create_prompt(data: PromptCreate, repos: ReposDep, _admin: Profile = AdminDep) -> PromptRead:
    return PromptRead.model_validate(await topic_service.create_prompt(repos, data))


@router.patch(
    "/{prompt_id}",
    response_model=PromptRead,
    summary="Update Prompt",
    responses={403: {"description": "Admin role required"}},
)
async def update_prompt(prompt_id: str, data: PromptUpdate, repos: ReposDep, _admin: Profile = AdminDep) -> PromptRead:
    return PromptRead.model_validate(await topic_service.update_prompt(repos, prompt_id, data))


@router.delete(
    "/{prompt_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Prompt",
    responses={403: {"description": "Admin role required"}},
)
async def delete_prompt(prompt_id: str, repos: ReposDep, _admin: Profile = AdminDep) -> Response:
    await topic_service.delete_prompt(repos, prompt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
