"""Unit tests for prompt, topic bookmark, response and video repositories."""

from __future__ import annotations

from datetime import timedelta

import pytest

from telloom.core.database.base import utc_now
from telloom.core.database.entities import (
    Prompt,
    PromptCategory,
    PromptResponse,
    PromptResponseAttachment,
    PromptResponseFavorite,
    TopicFavorite,
    TopicQueueItem,
    Video,
    VideoTranscript,
)
from telloom.core.models.domain.enums import Role, VideoStatus

pytestmark = pytest.mark.asyncio


class TestPromptRepository:
    async def test_list_by_category_context_first(self, db, rows):
        topic = await db.topics.create(PromptCategory(category="Childhood"))
        plain = await rows.prompt("What games did you play?", topic.id)
        context = await db.prompts.create(
            Prompt(prompt_text="Where were you born?", prompt_category_id=topic.id, is_context_establishing=True)
        )
        await rows.prompt("Unrelated")

        assert [p.id for p in await db.prompts.list_by_category(topic.id)] == [context.id, plain.id]

    async def test_count_by_category(self, db, rows):
        first = await db.topics.create(PromptCategory(category="Childhood"))
        second = await db.topics.create(PromptCategory(category="Work"))
        await rows.prompt("a", first.id)
        await rows.prompt("b", first.id)
        await rows.prompt("c", second.id)
        await rows.prompt("orphan")

        assert await db.prompts.count_by_category() == {first.id: 2, second.id: 1}


class TestTopicBookmarks:
    async def test_scope_separates_roles_and_sharers(self, db, rows):
        topic = await db.topics.create(PromptCategory(category="Childhood"))
        profile = await rows.profile()
        sharer = await rows.sharer()
        own = await db.topic_favorites.create(TopicFavorite(profile_id=profile.id, prompt_category_id=topic.id))
        as_executor = await db.topic_favorites.create(
            TopicFavorite(
                profile_id=profile.id, prompt_category_id=topic.id, role=Role.EXECUTOR.value, sharer_id=sharer.id
            )
        )

        assert (await db.topic_favorites.get_scoped(profile.id, topic.id, None, None)).id == own.id
        found = await db.topic_favorites.get_scoped(profile.id, topic.id, Role.EXECUTOR.value, sharer.id)
        assert found.id == as_executor.id
        assert await db.topic_favorites.get_scoped(profile.id, topic.id, Role.LISTENER.value, None) is None

    async def test_category_ids(self, db, rows):
        first = await db.topics.create(PromptCategory(category="Childhood"))
        second = await db.topics.create(PromptCategory(category="Work"))
        profile = await rows.profile()
        for topic in (first, second):
            await db.topic_queue.create(
                TopicQueueItem(profile_id=profile.id, prompt_category_id=topic.id, role=Role.SHARER.value)
            )

        assert await db.topic_queue.category_ids(profile.id, Role.SHARER.value, None) == {first.id, second.id}
        assert await db.topic_queue.category_ids(profile.id, None, None) == set()


class TestResponseRepositories:
    async def test_lookups(self, db, rows):
        sharer = await rows.sharer()
        prompt = await rows.prompt()
        other_prompt = await rows.prompt("Another")
        video = await db.videos.create(Video(profile_sharer_id=sharer.id, prompt_id=prompt.id))
        answer = await db.responses.create(
            PromptResponse(profile_sharer_id=sharer.id, prompt_id=prompt.id, video_id=video.id)
        )
        await db.responses.create(PromptResponse(profile_sharer_id=sharer.id, prompt_id=other_prompt.id))

        assert (await db.responses.get_for_prompt(sharer.id, prompt.id)).id == answer.id
        assert (await db.responses.get_by_video_id(video.id)).id == answer.id
        assert len(await db.responses.list_for_sharer(sharer.id)) == 2
        assert [r.id for r in await db.responses.list_for_sharer(sharer.id, [prompt.id])] == [answer.id]

    async def test_attachments_in_upload_order(self, db, rows):
        sharer = await rows.sharer()
        answer = await db.responses.create(PromptResponse(profile_sharer_id=sharer.id, prompt_id=(await rows.prompt()).id))
        start = utc_now()
        for i, name in enumerate(["b.jpg", "a.jpg"]):
            await db.attachments.create(
                PromptResponseAttachment(
                    prompt_response_id=answer.id,
                    profile_sharer_id=sharer.id,
                    file_url=f"sam/{name}",
                    file_type="image/jpeg",
                    file_name=name,
                    uploaded_at=start + timedelta(seconds=i),
                )
            )

        assert [a.file_name for a in await db.attachments.list_for_response(answer.id)] == ["b.jpg", "a.jpg"]

    async def test_favorite_pair(self, db, rows):
        sharer = await rows.sharer()
        viewer = await rows.profile()
        answer = await db.responses.create(PromptResponse(profile_sharer_id=sharer.id, prompt_id=(await rows.prompt()).id))
        favorite = await db.response_favorites.create(
            PromptResponseFavorite(profile_id=viewer.id, prompt_response_id=answer.id)
        )

        assert (await db.response_favorites.get_pair(viewer.id, answer.id)).id == favorite.id
        assert await db.response_favorites.get_pair(sharer.profile_id, answer.id) is None

    async def test_touch_bumps_existing_entry(self, db, rows):
        sharer = await rows.sharer()
        viewer = await rows.profile()
        first = await db.responses.create(PromptResponse(profile_sharer_id=sharer.id, prompt_id=(await rows.prompt()).id))
        second = await db.responses.create(
            PromptResponse(profile_sharer_id=sharer.id, prompt_id=(await rows.prompt("Two")).id)
        )

        entry = await db.recently_watched.touch(viewer.id, first.id)
        entry.watched_at = utc_now() - timedelta(hours=1)
        await db.recently_watched.update(entry)
        await db.recently_watched.touch(viewer.id, second.id)
        assert [e.prompt_response_id for e in await db.recently_watched.list_recent(viewer.id)] == [second.id, first.id]

        again = await db.recently_watched.touch(viewer.id, first.id)
        assert again.id == entry.id
        recent = await db.recently_watched.list_recent(viewer.id)
        assert [e.prompt_response_id for e in recent] == [first.id, second.id]
        assert len(await db.recently_watched.list_recent(viewer.id, limit=1)) == 1


class TestVideoRepositories:
    async def test_lookup_by_upload_and_asset(self, db, rows):
        sharer = await rows.sharer()
        video = await db.videos.create(Video(profile_sharer_id=sharer.id, mux_upload_id="up-1", mux_asset_id="as-1"))

        assert (await db.videos.get_by_upload_id("up-1")).id == video.id
        assert (await db.videos.get_by_asset_id("as-1")).id == video.id
        assert await db.videos.get_by_upload_id("up-2") is None

    async def test_active_for_prompt_skips_errored(self, db, rows):
        sharer = await rows.sharer()
        prompt = await rows.prompt()
        await db.videos.create(Video(profile_sharer_id=sharer.id, prompt_id=prompt.id, status=VideoStatus.ERRORED))
        assert await db.videos.get_active_for_prompt(sharer.id, prompt.id) is None

        active = await db.videos.create(
            Video(profile_sharer_id=sharer.id, prompt_id=prompt.id, status=VideoStatus.PREPARING)
        )
        assert (await db.videos.get_active_for_prompt(sharer.id, prompt.id)).id == active.id

    async def test_get_many(self, db, rows):
        sharer = await rows.sharer()
        first = await db.videos.create(Video(profile_sharer_id=sharer.id))
        await db.videos.create(Video(profile_sharer_id=sharer.id))

        assert [v.id for v in await db.videos.get_many([first.id])] == [first.id]
        assert await db.videos.get_many([]) == []

    async def test_transcripts(self, db, rows):
        sharer = await rows.sharer()
        video = await db.videos.create(Video(profile_sharer_id=sharer.id))
        transcript = await db.transcripts.create(
            VideoTranscript(video_id=video.id, transcript="hello", mux_track_id="track-1", language="en")
        )

        assert (await db.transcripts.get_by_track_id("track-1")).id == transcript.id
        assert [t.id for t in await db.transcripts.list_for_video(video.id)] == [transcript.id]
        assert await db.transcripts.list_for_video("missing") == []
