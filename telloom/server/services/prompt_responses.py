"""
Prompt responses, their attachments, favourites and watch history.
"""

from __future__ import annotations

from typing import List, Optional

from telloom.core.database.base import utc_now
from telloom.core.database.entities.profiles import Profile, ProfileSharer
from telloom.core.database.entities.responses import PromptResponse, PromptResponseAttachment, PromptResponseFavorite
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import NotFoundError, PermissionDeniedError
from telloom.core.logging_config import get_logger
from telloom.core.models.io.responses import (
    AttachmentCreate,
    AttachmentRead,
    PromptResponseRead,
    PromptResponseUpdate,
    PromptResponseUpsert,
    RecentlyWatchedItem,
)
from telloom.core.url_cache import URLCache, url_cache
from telloom.integrations.storage import StorageClient
from telloom.server.core.config import settings

from .access import can_view_sharer, resolve_acting_sharer

logger = get_logger(__name__)


async def upsert_response(repos: TelloomRepoBundle, profile: Profile, data: PromptResponseUpsert) -> PromptResponse:
    """Create the sharer's response to a prompt, or update the existing one."""
    ctx = await resolve_acting_sharer(repos, profile, data.sharer_id)
    if await repos.prompts.get_by_id(data.prompt_id) is None:
        raise NotFoundError("Prompt", data.prompt_id)

    response = await repos.responses.get_for_prompt(ctx.sharer.id, data.prompt_id)
    if response is None:
        response = PromptResponse(
            profile_sharer_id=ctx.sharer.id,
            prompt_id=data.prompt_id,
            response_notes=data.response_notes,
        )
        if data.privacy_level is not None:
            response.privacy_level = data.privacy_level
        response = await repos.responses.create(response)
        logger.info(f"Created response {response.id} for prompt {data.prompt_id} as {ctx.role.value}")
        return response

    if data.response_notes is not None:
        response.response_notes = data.response_notes
    if data.privacy_level is not None:
        response.privacy_level = data.privacy_level
    return await repos.responses.update(response)


async def _load(repos: TelloomRepoBundle, response_id: str) -> tuple[PromptResponse, ProfileSharer]:
    response = await repos.responses.get_by_id(response_id)
    if response is None:
        raise NotFoundError("Prompt response", response_id)
    sharer = await repos.sharers.get_by_id(response.profile_sharer_id)
    if sharer is None:
        raise NotFoundError("Sharer", response.profile_sharer_id)
    return response, sharer


async def get_viewable_response(repos: TelloomRepoBundle, profile: Profile, response_id: str) -> PromptResponse:
    response, sharer = await _load(repos, response_id)
    if not await can_view_sharer(repos, profile, sharer):
        raise PermissionDeniedError("Not authorized to view this response")
    return response


async def get_managed_response(repos: TelloomRepoBundle, profile: Profile, response_id: str) -> PromptResponse:
    """Load a response the caller may change: its sharer or one of the sharer's executors."""
    response, sharer = await _load(repos, response_id)
    await resolve_acting_sharer(repos, profile, sharer.id)
    return response


async def update_response(
    repos: TelloomRepoBundle, profile: Profile, response_id: str, data: PromptResponseUpdate
) -> PromptResponse:
    response = await get_managed_response(repos, profile, response_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(response, key, value)
    return await repos.responses.update(response)


async def delete_response(
    repos: TelloomRepoBundle, storage: StorageClient, profile: Profile, response_id: str
) -> None:
    """Delete a response together with its attachments, favourites and watch history."""
    response = await get_managed_response(repos, profile, response_id)
    for attachment in await repos.attachments.list_for_response(response.id):
        await _delete_attachment(repos, storage, attachment)
    for favorite in await repos.response_favorites.list(filters={"prompt_response_id": response.id}):
        await repos.response_favorites.delete(favorite.id)
    for watched in await repos.recently_watched.list(filters={"prompt_response_id": response.id}):
        await repos.recently_watched.delete(watched.id)
    await repos.responses.delete(response.id)
    logger.info(f"Deleted response {response.id}")


# Attachments


def cache_key(bucket: str, path: str) -> str:
    return f"{bucket}/{path}"


async def signed_url_for(
    storage: StorageClient, path: str, *, cache: URLCache = url_cache, bucket: Optional[str] = None
) -> str:
    """Return a signed URL for an object, minting one only on a cache miss."""
    bucket = bucket or settings.supabase.storage_bucket
    key = cache_key(bucket, path)
    cached = cache.get(key)
    if cached is not None:
        return cached
    ttl = settings.signed_url_ttl_seconds
    url = await storage.create_signed_url(bucket, path, ttl)
    cache.set(key, url, ttl)
    return url


async def add_attachment(
    repos: TelloomRepoBundle, profile: Profile, response_id: str, data: AttachmentCreate
) -> PromptResponseAttachment:
    response = await get_managed_response(repos, profile, response_id)
    attachment = await repos.attachments.create(
        PromptResponseAttachment(
            prompt_response_id=response.id,
            profile_sharer_id=response.profile_sharer_id,
            **data.model_dump(),
        )
    )
    logger.info(f"Attached {attachment.file_name} to response {response.id}")
    return attachment


async def list_attachments(
    repos: TelloomRepoBundle, storage: StorageClient, profile: Profile, response_id: str
) -> List[AttachmentRead]:
    response = await get_viewable_response(repos, profile, response_id)
    items: List[AttachmentRead] = []
    for attachment in await repos.attachments.list_for_response(response.id):
        item = AttachmentRead.model_validate(attachment)
        item.signed_url = await signed_url_for(storage, attachment.file_url)
        items.append(item)
    return items


async def _delete_attachment(
    repos: TelloomRepoBundle, storage: StorageClient, attachment: PromptResponseAttachment
) -> None:
    bucket = settings.supabase.storage_bucket
    await storage.remove(bucket, [attachment.file_url])
    url_cache.invalidate(cache_key(bucket, attachment.file_url))
    await repos.attachments.delete(attachment.id)


async def delete_attachment(
    repos: TelloomRepoBundle, storage: StorageClient, profile: Profile, attachment_id: str
) -> None:
    """Remove the stored object first, then the row."""
    attachment = await repos.attachments.get_by_id(attachment_id)
    if attachment is None:
        raise NotFoundError("Attachment", attachment_id)
    await resolve_acting_sharer(repos, profile, attachment.profile_sharer_id)
    await _delete_attachment(repos, storage, attachment)
    logger.info(f"Deleted attachment {attachment_id}")


# Favourites and watch history


async def set_favorite(repos: TelloomRepoBundle, profile: Profile, response_id: str, active: bool) -> bool:
    response = await get_viewable_response(repos, profile, response_id)
    existing = await repos.response_favorites.get_pair(profile.id, response.id)
    if active and existing is None:
        await repos.response_favorites.create(PromptResponseFavorite(profile_id=profile.id, prompt_response_id=response.id))
    elif not active and existing is not None:
        await repos.response_favorites.delete(existing.id)
    return active


async def mark_watched(repos: TelloomRepoBundle, profile: Profile, response_id: str) -> RecentlyWatchedItem:
    """Record a view; listeners also get their ``last_viewed`` bumped."""
    response = await get_viewable_response(repos, profile, response_id)
    watched = await repos.recently_watched.touch(profile.id, response.id)
    link = await repos.listeners.get_link(profile.id, response.profile_sharer_id)
    if link is not None:
        link.last_viewed = utc_now()
        await repos.listeners.update(link)
    return RecentlyWatchedItem(prompt_response_id=response.id, watched_at=watched.watched_at)


async def recently_watched(repos: TelloomRepoBundle, profile: Profile, limit: int = 20) -> List[RecentlyWatchedItem]:
    """The caller's watch history, leaving out responses of sharers they can no longer see."""
    rows = await repos.recently_watched.list_recent(profile.id, limit)
    visible: dict[str, bool] = {}
    items: List[RecentlyWatchedItem] = []
    for row in rows:
        response = await repos.responses.get_by_id(row.prompt_response_id)
        if response is not None:
            sharer_id = response.profile_sharer_id
            if sharer_id not in visible:
                sharer = await repos.sharers.get_by_id(sharer_id)
                visible[sharer_id] = sharer is not None and await can_view_sharer(repos, profile, sharer)
            if not visible[sharer_id]:
                continue
        items.append(
            RecentlyWatchedItem(
                prompt_response_id=row.prompt_response_id,
                watched_at=row.watched_at,
                response=PromptResponseRead.model_validate(response) if response is not None else None,
            )
        )
    return items
