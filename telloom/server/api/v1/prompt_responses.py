"""
Prompt Response Endpoints.

A sharer's answer to a prompt: notes, privacy level, the linked video,
attachments, and the viewer-side favourite and watch-history marks.
"""

from typing import List

from fastapi import APIRouter, Query, Response, status

from telloom.core.models.io.responses import (
    AttachmentCreate,
    AttachmentRead,
    FavoriteResult,
    PromptResponseRead,
    PromptResponseUpdate,
    PromptResponseUpsert,
    RecentlyWatchedItem,
)
from telloom.server.services import prompt_responses as response_service
from telloom.server.services.deps import CurrentProfileDep, ReposDep, StorageClientDep

router = APIRouter()


@router.post(
    "",
    response_model=PromptResponseRead,
    summary="Save Prompt Response",
    description="Create or update the sharer's response to a prompt.",
    responses={403: {"description": "Caller does not manage the sharer"}, 404: {"description": "Prompt not found"}},
)
async def upsert_response(data: PromptResponseUpsert, profile: CurrentProfileDep, repos: ReposDep) -> PromptResponseRead:
    """
    Save a response.

    There is at most one response per sharer and prompt: a second call
    updates the notes and privacy level of the existing one.
    """
    response = await response_service.upsert_response(repos, profile, data)
    return PromptResponseRead.model_validate(response)


@router.get(
    "/recently-watched",
    response_model=List[RecentlyWatchedItem],
    summary="List Recently Watched",
    description="Responses the caller watched, most recent first.",
)
async def list_recently_watched(
    profile: CurrentProfileDep, repos: ReposDep, limit: int = Query(default=20, ge=1, le=100)
) -> List[RecentlyWatchedItem]:
    return await response_service.recently_watched(repos, profile, limit)


@router.get(
    "/{response_id}",
    response_model=PromptResponseRead,
    summary="Get Prompt Response",
    responses={403: {"description": "No access to the sharer"}, 404: {"description": "Response not found"}},
)
async def get_response(response_id: str, profile: CurrentProfileDep, repos: ReposDep) -> PromptResponseRead:
    response = await response_service.get_viewable_response(repos, profile, response_id)
    return PromptResponseRead.model_validate(response)


@router.patch(
    "/{response_id}",
    response_model=PromptResponseRead,
    summary="Update Prompt Response",
    responses={403: {"description": "Caller does not manage the sharer"}},
)
async def update_response(
    response_id: str, data: PromptResponseUpdate, profile: CurrentProfileDep, repos: ReposDep
) -> PromptResponseRead:
    response = await response_service.update_response(repos, profile, response_id, data)
    return PromptResponseRead.model_validate(response)


@router.delete(
    "/{response_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Prompt Response",
    description="Delete a response with its attachments (including stored files), favourites and watch history.",
)
async def delete_response(
    response_id: str, profile: CurrentProfileDep, repos: ReposDep, storage: StorageClientDep
) -> Response:
    await response_service.delete_response(repos, storage, profile, response_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{response_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Attachment",
    description="Record a file that was already uploaded to the attachments bucket.",
)
async def add_attachment(
    response_id: str, data: AttachmentCreate, profile: CurrentProfileDep, repos: ReposDep
) -> AttachmentRead:
    attachment = await response_service.add_attachment(repos, profile, response_id, data)
    return AttachmentRead.model_validate(attachment)


@router.get(
    "/{response_id}/attachments",
    response_model=List[AttachmentRead],
    summary="List Attachments",
    description="Attachments of a response, each with a short-lived signed URL.",
)
async def list_attachments(
    response_id: str, profile: CurrentProfileDep, repos: ReposDep, storage: StorageClientDep
) -> List[AttachmentRead]:
    """
    List attachments.

    Signed URLs are reused from an in-process cache while they are still
    comfortably valid.
    """
    return await response_service.list_attachments(repos, storage, profile, response_id)


@router.post("/{response_id}/favorite", response_model=FavoriteResult, summary="Favourite Response")
async def favorite_response(response_id: str, profile: CurrentProfileDep, repos: ReposDep) -> FavoriteResult:
    active = await response_service.set_favorite(repos, profile, response_id, True)
    return FavoriteResult(prompt_response_id=response_id, is_favorite=active)


@router.delete("/{response_id}/favorite", response_model=FavoriteResult, summary="Unfavourite Response")
async def unfavorite_response(response_id: str, profile: CurrentProfileDep, repos: ReposDep) -> FavoriteResult:
    active = await response_service.set_favorite(repos, profile, response_id, False)
    return FavoriteResult(prompt_response_id=response_id, is_favorite=active)


@router.post(
    "/{response_id}/watched",
    response_model=RecentlyWatchedItem,
    summary="Mark Response Watched",
    description="Record that the caller watched the response now.",
)
async def mark_watched(response_id: str, profile: CurrentProfileDep, repos: ReposDep) -> RecentlyWatchedItem:
    return await response_service.mark_watched(repos, profile, response_id)
