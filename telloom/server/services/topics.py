"""
Topic (prompt category) catalogue, per-sharer progress and topic bookmarks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from telloom.core.database.entities.profiles import Profile
from telloom.core.database.entities.prompts import Prompt, PromptCategory, TopicFavorite, TopicQueueItem
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import Role
from telloom.core.models.io.topics import (
    PromptCreate,
    PromptRead,
    PromptResponseSummary,
    PromptUpdate,
    PromptWithResponse,
    TopicCreate,
    TopicDetail,
    TopicProgress,
    TopicRead,
    TopicUpdate,
    VideoSummary,
)

from .access import get_viewable_sharer

logger = get_logger(__name__)

FAVORITE = "favorite"
QUEUE = "queue"


@dataclass(frozen=True)
class BookmarkScope:
    """The role and sharer a topic bookmark is recorded under."""

    role: Role
    sharer_id: Optional[str] = None
    executor_id: Optional[str] = None


async def resolve_bookmark_scope(
    repos: TelloomRepoBundle, profile: Profile, sharer_id: Optional[str] = None
) -> BookmarkScope:
    """Work out the scope of the caller's bookmarks for an optional sharer.

    Own bookmarks carry no sharer but need the caller's sharer record.
    Executors bookmark per managed sharer, listeners per followed sharer.
    """
    if sharer_id is None:
        if await repos.sharers.get_by_profile_id(profile.id) is None:
            raise NotFoundError("Sharer profile")
        return BookmarkScope(role=Role.SHARER)
    sharer = await repos.sharers.get_by_id(sharer_id)
    if sharer is None:
        raise NotFoundError("Sharer", sharer_id)
    if sharer.profile_id == profile.id:
        return BookmarkScope(role=Role.SHARER)
    executor_link = await repos.executors.get_link(profile.id, sharer.id)
    if executor_link is not None:
        return BookmarkScope(role=Role.EXECUTOR, sharer_id=sharer.id, executor_id=executor_link.id)
    listener_link = await repos.listeners.get_link(profile.id, sharer.id)
    if listener_link is not None and listener_link.has_access:
        return BookmarkScope(role=Role.LISTENER, sharer_id=sharer.id)
    raise PermissionDeniedError("Not authorized to bookmark topics for this sharer")


# Catalogue


async def list_topics(repos: TelloomRepoBundle) -> List[PromptCategory]:
    return await repos.topics.list_all()


async def get_topic(repos: TelloomRepoBundle, topic_id: str) -> PromptCategory:
    topic = await repos.topics.get_by_id(topic_id)
    if topic is None:
        raise NotFoundError("Topic", topic_id)
    return topic


async def create_topic(repos: TelloomRepoBundle, data: TopicCreate) -> PromptCategory:
    topic = await repos.topics.create(PromptCategory(**data.model_dump()))
    logger.info(f"Created topic {topic.id} ({topic.category})")
    return topic


async def update_topic(repos: TelloomRepoBundle, topic_id: str, data: TopicUpdate) -> PromptCategory:
    topic = await get_topic(repos, topic_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(topic, key, value)
    return await repos.topics.update(topic)


async def delete_topic(repos: TelloomRepoBundle, topic_id: str) -> None:
    await get_topic(repos, topic_id)
    if await repos.prompts.list_by_category(topic_id):
        raise ConflictError("Topic still has prompts")
    await repos.topic_favorites.delete_where(category_id=topic_id)
    await repos.topic_queue.delete_where(category_id=topic_id)
    await repos.topics.delete(topic_id)
    logger.info(f"Deleted topic {topic_id}")


async def list_prompts(repos: TelloomRepoBundle, topic_id: Optional[str] = None) -> List[Prompt]:
    if topic_id is not None:
        return await repos.prompts.list_by_category(topic_id)
    return await repos.prompts.list()


async def get_prompt(repos: TelloomRepoBundle, prompt_id: str) -> Prompt:
    prompt = await repos.prompts.get_by_id(prompt_id)
    if prompt is None:
        raise NotFoundError("Prompt", prompt_id)
    return prompt


async def create_prompt(repos: TelloomRepoBundle, data: PromptCreate) -> Prompt:
    if data.prompt_category_id is not None:
        await get_topic(repos, data.prompt_category_id)
    return await repos.prompts.create(Prompt(**data.model_dump()))


async def update_prompt(repos: TelloomRepoBundle, prompt_id: str, data: PromptUpdate) -> Prompt:
    prompt = await get_prompt(repos, prompt_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("prompt_category_id") is not None:
        await get_topic(repos, changes["prompt_category_id"])
    for key, value in changes.items():
        setattr(prompt, key, value)
    return await repos.prompts.update(prompt)


async def delete_prompt(repos: TelloomRepoBundle, prompt_id: str) -> None:
    """Delete a prompt nobody has answered yet."""
    await get_prompt(repos, prompt_id)
    answered = await repos.responses.list(limit=1, filters={"prompt_id": prompt_id})
    recorded = await repos.videos.list(limit=1, filters={"prompt_id": prompt_id})
    if answered or recorded:
        raise ConflictError("Prompt already has responses or videos")
    await repos.prompts.delete(prompt_id)
    logger.info(f"Deleted prompt {prompt_id}")


# Progress and detail


async def _sharer_for_view(repos: TelloomRepoBundle, profile: Profile, sharer_id: Optional[str]):
    if sharer_id is None:
        own = await repos.sharers.get_by_profile_id(profile.id)
        if own is None:
            raise NotFoundError("Sharer profile")
        return own
    return await get_viewable_sharer(repos, profile, sharer_id)


async def topic_progress(
    repos: TelloomRepoBundle, profile: Profile, sharer_id: Optional[str] = None
) -> List[TopicProgress]:
    """Per topic: prompt count, prompts answered by the sharer, and the caller's bookmarks."""
    sharer = await _sharer_for_view(repos, profile, sharer_id)
    scope = await resolve_bookmark_scope(repos, profile, sharer_id)

    topics = await repos.topics.list_all()
    prompt_counts = await repos.prompts.count_by_category()
    responses = await repos.responses.list_for_sharer(sharer.id)
    answered = {r.prompt_id for r in responses if r.prompt_id is not None}

    completed: dict[str, int] = {}
    for prompt in await repos.prompts.list():
        if prompt.prompt_category_id is not None and prompt.id in answered:
            completed[prompt.prompt_category_id] = completed.get(prompt.prompt_category_id, 0) + 1

    favorites = await repos.topic_favorites.category_ids(profile.id, scope.role.value, scope.sharer_id)
    queued = await repos.topic_queue.category_ids(profile.id, scope.role.value, scope.sharer_id)

    return [
        TopicProgress(
            id=topic.id,
            category=topic.category,
            description=topic.description,
            theme=topic.theme,
            prompt_count=prompt_counts.get(topic.id, 0),
            completed_count=completed.get(topic.id, 0),
            is_favorite=topic.id in favorites,
            is_in_queue=topic.id in queued,
        )
        for topic in topics
    ]


async def topic_detail(repos: TelloomRepoBundle, profile: Profile, topic_id: str, sharer_id: str) -> TopicDetail:
    """A topic with its prompts and, per prompt, the sharer's response and video."""
    topic = await get_topic(repos, topic_id)
    sharer = await get_viewable_sharer(repos, profile, sharer_id)
    scope = await resolve_bookmark_scope(repos, profile, sharer_id)

    prompts = await repos.prompts.list_by_category(topic.id)
    responses = await repos.responses.list_for_sharer(sharer.id, [p.id for p in prompts])
    by_prompt = {r.prompt_id: r for r in responses}
    videos = {v.id: v for v in await repos.videos.get_many([r.video_id for r in responses if r.video_id])}

    items: List[PromptWithResponse] = []
    for prompt in prompts:
        response = by_prompt.get(prompt.id)
        video = videos.get(response.video_id) if response is not None and response.video_id else None
        items.append(
            PromptWithResponse(
                **PromptRead.model_validate(prompt).model_dump(),
                response=PromptResponseSummary.model_validate(response) if response is not None else None,
                video=VideoSummary.model_validate(video) if video is not None else None,
            )
        )

    favorite = await repos.topic_favorites.get_scoped(profile.id, topic.id, scope.role.value, scope.sharer_id)
    queued = await repos.topic_queue.get_scoped(profile.id, topic.id, scope.role.value, scope.sharer_id)
    return TopicDetail(
        **TopicRead.model_validate(topic).model_dump(),
        sharer_id=sharer.id,
        prompts=items,
        is_favorite=favorite is not None,
        is_in_queue=queued is not None,
    )


# Bookmarks


async def set_bookmark(
    repos: TelloomRepoBundle,
    profile: Profile,
    topic_id: str,
    kind: str,
    active: bool,
    sharer_id: Optional[str] = None,
) -> bool:
    """Add or remove a favourite/queue bookmark. Idempotent in both directions."""
    await get_topic(repos, topic_id)
    scope = await resolve_bookmark_scope(repos, profile, sharer_id)
    repo = repos.topic_favorites if kind == FAVORITE else repos.topic_queue
    model = TopicFavorite if kind == FAVORITE else TopicQueueItem

    existing = await repo.get_scoped(profile.id, topic_id, scope.role.value, scope.sharer_id)
    if active and existing is None:
        await repo.create(
            model(
                profile_id=profile.id,
                prompt_category_id=topic_id,
                role=scope.role.value,
                sharer_id=scope.sharer_id,
                executor_id=scope.executor_id,
            )
        )
        logger.debug(f"Added {kind} of topic {topic_id} for {profile.id} as {scope.role.value}")
    elif not active and existing is not None:
        await repo.delete(existing.id)
        logger.debug(f"Removed {kind} of topic {topic_id} for {profile.id} as {scope.role.value}")
    return active
