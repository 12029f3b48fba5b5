"""
Topic Endpoints.

Topics group prompts. Anyone signed in can browse them; only admins edit
the catalogue. Progress and detail views are computed for one sharer, and
favourites / queue bookmarks are kept per role and sharer.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from telloom.core.database.entities.profiles import Profile
from telloom.core.models.domain.enums import Role
from telloom.core.models.io.topics import BookmarkResult, TopicCreate, TopicDetail, TopicProgress, TopicRead, TopicUpdate
from telloom.server.services import topics as topic_service
from telloom.server.services.deps import CurrentProfileDep, CurrentUserDep, ReposDep, require_role

router = APIRouter()

AdminDep = Depends(require_role(Role.ADMIN))


@router.get(
    "",
    response_model=List[TopicRead],
    summary="List Topics",
    description="All topics ordered by name.",
)
async def list_topics(_user: CurrentUserDep, repos: ReposDep) -> List[TopicRead]:
    return [TopicRead.model_validate(t) for t in await topic_service.list_topics(repos)]


@router.get(
    "/progress",
    response_model=List[TopicProgress],
    summary="Get Topic Progress",
    description="Per topic: prompt count, prompts answered by the sharer and the caller's bookmarks.",
    responses={403: {"description": "No access to the sharer"}},
)
async def get_progress(
    profile: CurrentProfileDep, repos: ReposDep, sharer_id: Optional[str] = None
) -> List[TopicProgress]:
    """
    Get progress across topics.

    Without ``sharer_id`` the caller's own sharer is used. Another sharer
    needs an executor link or a listener link with access.
    """
    return await topic_service.topic_progress(repos, profile, sharer_id)


@router.post(
    "",
    response_model=TopicRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Topic",
    responses={403: {"description": "Admin role required"}},
)
async def create_topic(data: TopicCreate, repos: ReposDep, _admin: Profile = AdminDep) -> TopicRead:
    return TopicRead.model_validate(await topic_service.create_topic(repos, data))


@router.get("/{topic_id}", response_model=TopicRead, summary="Get Topic")
async def get_topic(topic_id: str, _user: CurrentUserDep, repos: ReposDep) -> TopicRead:
    return TopicRead.model_validate(await topic_service.get_topic(repos, topic_id))


@router.patch(
    "/{topic_id}",
    response_model=TopicRead,
    summary="Update Topic",
    responses={403: {"description": "Admin role required"}},
)
async def update_topic(topic_id: str, data: TopicUpdate, repos: ReposDep, _admin: Profile = AdminDep) -> TopicRead:
    return TopicRead.model_validate(await topic_service.update_topic(repos, topic_id, data))


@router.delete(
    "/{topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Topic",
    responses={403: {"description": "Admin role required"}, 409: {"description": "Topic still has prompts"}},
)
async def delete_topic(topic_id: str, repos: ReposDep, _admin: Profile = AdminDep) -> Response:
    await topic_service.delete_topic(repos, topic_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{topic_id}/sharers/{sharer_id}",
    response_model=TopicDetail,
    summary="Get Topic For Sharer",
    description="A topic with its prompts and, per prompt, the sharer's response and video.",
    responses={403: {"description": "No access to the sharer"}, 404: {"description": "Topic or sharer not found"}},
)
async def get_topic_for_sharer(
    topic_id: str, sharer_id: str, profile: CurrentProfileDep, repos: ReposDep
) -> TopicDetail:
    return await topic_service.topic_detail(repos, profile, topic_id, sharer_id)


async def _bookmark(
    repos, profile: Profile, topic_id: str, kind: str, active: bool, sharer_id: Optional[str]
) -> BookmarkResult:
    await topic_service.set_bookmark(repos, profile, topic_id, kind, active, sharer_id)
    return BookmarkResult(topic_id=topic_id, kind=kind, active=active)


@router.post("/{topic_id}/favorite", response_model=BookmarkResult, summary="Favourite Topic")
async def favorite_topic(
    topic_id: str, profile: CurrentProfileDep, repos: ReposDep, sharer_id: Optional[str] = None
) -> BookmarkResult:
    """
    Favourite a topic.

    Bookmarks made while viewing a managed or followed sharer (``sharer_id``)
    are kept apart from the caller's own.
    """
    return await _bookmark(repos, profile, topic_id, topic_service.FAVORITE, True, sharer_id)


@router.delete("/{topic_id}/favorite", response_model=BookmarkResult, summary="Unfavourite Topic")
async def unfavorite_topic(
    topic_id: str, profile: CurrentProfileDep, repos: ReposDep, sharer_id: Optional[str] = None
) -> BookmarkResult:
    return await _bookmark(repos, profile, topic_id, topic_service.FAVORITE, False, sharer_id)


@router.post("/{topic_id}/queue", response_model=BookmarkResult, summary="Queue Topic")
async def queue_topic(
    topic_id: str, profile: CurrentProfileDep, repos: ReposDep, sharer_id: Optional[str] = None
) -> BookmarkResult:
    return await _bookmark(repos, profile, topic_id, topic_service.QUEUE, True, sharer_id)


@router.delete("/{topic_id}/queue", response_model=BookmarkResult, summary="Unqueue Topic")
async def unqueue_topic(
    topic_id: str, profile: CurrentProfileDep, repos: ReposDep, sharer_id: Optional[str] = None
) -> BookmarkResult:
    return await _bookmark(repos, profile, topic_id, topic_service.QUEUE, False, sharer_id)
