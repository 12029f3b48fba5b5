"""
API tests for the topic catalogue, progress, detail and bookmarks.
"""

import pytest
from httpx import AsyncClient

from telloom.core.models.domain.enums import Role, VideoStatus

pytestmark = pytest.mark.asyncio


class TestTopicCatalogue:
    async def test_list_is_ordered_by_name(self, client: AsyncClient, factory):
        await factory.topic("Travel")
        await factory.topic("Childhood")
        user = await factory.profile()
        response = await client.get("/api/v1/topics", headers=factory.headers(user))
        assert response.status_code == 200
        assert [t["category"] for t in response.json()] == ["Childhood", "Travel"]

    async def test_list_needs_session_but_no_profile(self, client: AsyncClient, factory):
        user_id = factory.auth_user()
        response = await client.get("/api/v1/topics", headers=factory.headers(user_id))
        assert response.status_code == 200
        assert (await client.get("/api/v1/topics")).status_code == 401

    async def test_admin_creates_topic(self, client: AsyncClient, factory):
        admin = await factory.admin()
        response = await client.post(
            "/api/v1/topics",
            json={"category": "Family", "description": "Parents and siblings", "theme": "warm"},
            headers=factory.headers(admin),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["category"] == "Family"
        assert data["theme"] == "warm"

    async def test_admin_role_row_is_enough(self, client: AsyncClient, factory):
        admin = await factory.profile(roles=[Role.ADMIN])
        response = await client.post("/api/v1/topics", json={"category": "Work"}, headers=factory.headers(admin))
        assert response.status_code == 201

    async def test_non_admin_cannot_create(self, client: AsyncClient, factory):
        owner, _ = await factory.sharer()
        response = await client.post("/api/v1/topics", json={"category": "Work"}, headers=factory.headers(owner))
        assert response.status_code == 403

    async def test_get_and_update(self, client: AsyncClient, factory):
        admin = await factory.admin()
        topic = await factory.topic("Schol")
        response = await client.patch(
            f"/api/v1/topics/{topic.id}", json={"category": "School"}, headers=factory.headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["category"] == "School"

        fetched = await client.get(f"/api/v1/topics/{topic.id}", headers=factory.headers(admin))
        assert fetched.json()["category"] == "School"

    async def test_get_unknown_topic(self, client: AsyncClient, factory):
        user = await factory.profile()
        response = await client.get("/api/v1/topics/missing", headers=factory.headers(user))
        assert response.status_code == 404

    async def test_delete_empty_topic(self, client: AsyncClient, factory, repos):
        admin = await factory.admin()
        topic = await factory.topic()
        response = await client.delete(f"/api/v1/topics/{topic.id}", headers=factory.headers(admin))
        assert response.status_code == 204
        assert await repos.topics.get_by_id(topic.id) is None

    async def test_delete_bookmarked_topic(self, client: AsyncClient, factory, repos):
        admin = await factory.admin()
        owner, sharer = await factory.sharer()
        listener, _ = await factory.listener(sharer)
        topic = await factory.topic()
        await client.post(f"/api/v1/topics/{topic.id}/favorite", headers=factory.headers(owner))
        await client.post(
            f"/api/v1/topics/{topic.id}/queue", params={"sharer_id": sharer.id}, headers=factory.headers(listener)
        )

        response = await client.delete(f"/api/v1/topics/{topic.id}", headers=factory.headers(admin))
        assert response.status_code == 204
        assert await repos.topics.get_by_id(topic.id) is None
        assert await repos.topic_favorites.list(filters={"prompt_category_id": topic.id}) == []
        assert await repos.topic_queue.list(filters={"prompt_category_id": topic.id}) == []

    async def test_delete_topic_with_prompts_conflicts(self, client: AsyncClient, factory, repos):
        admin = await factory.admin()
        topic = await factory.topic()
        await factory.prompt(topic)
        response = await client.delete(f"/api/v1/topics/{topic.id}", headers=factory.headers(admin))
        assert response.status_code == 409
        assert await repos.topics.get_by_id(topic.id) is not None


class TestTopicProgress:
    async def test_own_progress(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        childhood = await factory.topic("Childhood")
        travel = await factory.topic("Travel")
        answered = await factory.prompt(childhood, "First home?")
        await factory.prompt(childhood, "First friend?")
        await factory.prompt(travel, "Best trip?")
        await factory.response(sharer, answered)

        response = await client.get("/api/v1/topics/progress", headers=factory.headers(owner))
        assert response.status_code == 200
        by_name = {t["category"]: t for t in response.json()}
        assert by_name["Childhood"]["prompt_count"] == 2
        assert by_name["Childhood"]["completed_count"] == 1
        assert by_name["Travel"]["prompt_count"] == 1
        assert by_name["Travel"]["completed_count"] == 0
        assert by_name["Travel"]["is_favorite"] is False

    async def test_progress_without_sharer_record(self, client: AsyncClient, factory):
        profile = await factory.profile()
        response = await client.get("/api/v1/topics/progress", headers=factory.headers(profile))
        assert response.status_code == 404

    async def test_listener_with_access_sees_progress(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        await factory.topic()
        listener, _ = await factory.listener(sharer)
        response = await client.get(
            "/api/v1/topics/progress", params={"sharer_id": sharer.id}, headers=factory.headers(listener)
        )
        assert response.status_code == 200
        assert len(response.json()) == 1

    async def test_listener_without_access_is_forbidden(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        listener, _ = await factory.listener(sharer, has_access=False)
        response = await client.get(
            "/api/v1/topics/progress", params={"sharer_id": sharer.id}, headers=factory.headers(listener)
        )
        assert response.status_code == 403


class TestTopicDetail:
    async def test_prompts_with_response_and_video(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        topic = await factory.topic()
        answered = await factory.prompt(topic, "First home?")
        open_prompt = await factory.prompt(topic, "First friend?")
        video = await factory.video(sharer, answered, status=VideoStatus.READY, mux_playback_id="pb-1")
        await factory.response(sharer, answered, video_id=video.id, response_notes="notes")

        response = await client.get(
            f"/api/v1/topics/{topic.id}/sharers/{sharer.id}", headers=factory.headers(owner)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["sharer_id"] == sharer.id
        prompts = {p["id"]: p for p in data["prompts"]}
        assert prompts[answered.id]["response"]["response_notes"] == "notes"
        assert prompts[answered.id]["video"]["status"] == "READY"
        assert prompts[answered.id]["video"]["mux_playback_id"] == "pb-1"
        assert prompts[open_prompt.id]["response"] is None
        assert prompts[open_prompt.id]["video"] is None

    async def test_stranger_is_forbidden(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        topic = await factory.topic()
        stranger = await factory.profile()
        response = await client.get(
            f"/api/v1/topics/{topic.id}/sharers/{sharer.id}", headers=factory.headers(stranger)
        )
        assert response.status_code == 403

    async def test_unknown_sharer(self, client: AsyncClient, factory):
        owner, _ = await factory.sharer()
        topic = await factory.topic()
        response = await client.get(f"/api/v1/topics/{topic.id}/sharers/missing", headers=factory.headers(owner))
        assert response.status_code == 404


class TestTopicBookmarks:
    async def test_favorite_and_unfavorite_own(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        topic = await factory.topic()

        response = await client.post(f"/api/v1/topics/{topic.id}/favorite", headers=factory.headers(owner))
        assert response.status_code == 200
        assert response.json() == {"topic_id": topic.id, "kind": "favorite", "active": True}
        # Idempotent
        await client.post(f"/api/v1/topics/{topic.id}/favorite", headers=factory.headers(owner))

        progress = await client.get("/api/v1/topics/progress", headers=factory.headers(owner))
        assert progress.json()[0]["is_favorite"] is True

        response = await client.delete(f"/api/v1/topics/{topic.id}/favorite", headers=factory.headers(owner))
        assert response.json()["active"] is False
        progress = await client.get("/api/v1/topics/progress", headers=factory.headers(owner))
        assert progress.json()[0]["is_favorite"] is False

    async def test_executor_queue_is_scoped_to_sharer(self, client: AsyncClient, factory, repos):
        _, sharer = await factory.sharer()
        executor, link = await factory.executor(sharer)
        topic = await factory.topic()

        response = await client.post(
            f"/api/v1/topics/{topic.id}/queue", params={"sharer_id": sharer.id}, headers=factory.headers(executor)
        )
        assert response.status_code == 200
        assert response.json()["kind"] == "queue"

        row = await repos.topic_queue.get_scoped(executor.id, topic.id, Role.EXECUTOR.value, sharer.id)
        assert row is not None
        assert row.executor_id == link.id
        assert await repos.topic_queue.get_scoped(executor.id, topic.id, Role.SHARER.value, None) is None

        detail = await client.get(
            f"/api/v1/topics/{topic.id}/sharers/{sharer.id}", headers=factory.headers(executor)
        )
        assert detail.json()["is_in_queue"] is True

    async def test_listener_favorite_scope(self, client: AsyncClient, factory, repos):
        _, sharer = await factory.sharer()
        listener, _ = await factory.listener(sharer)
        topic = await factory.topic()
        await client.post(
            f"/api/v1/topics/{topic.id}/favorite", params={"sharer_id": sharer.id}, headers=factory.headers(listener)
        )
        row = await repos.topic_favorites.get_scoped(listener.id, topic.id, Role.LISTENER.value, sharer.id)
        assert row is not None

    async def test_stranger_cannot_bookmark_for_sharer(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        stranger = await factory.profile()
        topic = await factory.topic()
        response = await client.post(
            f"/api/v1/topics/{topic.id}/queue", params={"sharer_id": sharer.id}, headers=factory.headers(stranger)
        )
        assert response.status_code == 403

    async def test_unknown_topic(self, client: AsyncClient, factory):
        owner, _ = await factory.sharer()
        response = await client.post("/api/v1/topics/missing/favorite", headers=factory.headers(owner))
        assert response.status_code == 404

    async def test_own_bookmark_needs_sharer_record(self, client: AsyncClient, factory, repos):
        _, sharer = await factory.sharer()
        listener, _ = await factory.listener(sharer)
        topic = await factory.topic()

        response = await client.post(f"/api/v1/topics/{topic.id}/favorite", headers=factory.headers(listener))
        assert response.status_code == 404
        assert await repos.topic_favorites.list(filters={"profile_id": listener.id}) == []
