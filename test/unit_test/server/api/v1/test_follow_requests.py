"""
API tests for follow requests: request, list, approve, deny, withdraw.
"""

import pytest
from httpx import AsyncClient

from telloom.core.models.domain.enums import FollowRequestStatus, NotificationType, Role
from telloom.server.core.config import settings

pytestmark = pytest.mark.asyncio


async def _request(client: AsyncClient, factory, requestor, sharer):
    return await client.post(
        "/api/v1/follow-requests", json={"sharer_id": sharer.id}, headers=factory.headers(requestor)
    )


class TestCreateFollowRequest:
    async def test_request_notifies_sharer(self, client: AsyncClient, factory, repos):
        owner, sharer = await factory.sharer()
        fan = await factory.profile(first_name="Fay", last_name="Fan", email="fay@example.com")

        response = await _request(client, factory, fan, sharer)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["requestor_id"] == fan.id

        [notification] = await repos.notifications.list_for_user(owner.id)
        assert notification.type == NotificationType.FOLLOW_REQUEST.value
        assert notification.message == "Fay Fan (fay@example.com) has requested to follow you."
        assert notification.data["listener"]["email"] == "fay@example.com"

    async def test_request_emails_sharer(self, client: AsyncClient, factory, loops_api, monkeypatch):
        monkeypatch.setattr(settings, "loops_follow_request_template_id", "tmpl-follow")
        loops_api.add("POST", "/transactional", json_body={"success": True})
        owner, sharer = await factory.sharer(first_name="Rosa")
        fan = await factory.profile(first_name="Fay", last_name="Fan")

        await _request(client, factory, fan, sharer)

        [call] = loops_api.calls("POST", "/transactional")
        payload = loops_api.body(call)
        assert payload["email"] == owner.email
        assert payload["dataVariables"]["sharerName"] == "Rosa"
        assert payload["dataVariables"]["requestorName"] == "Fay Fan"
        assert payload["dataVariables"]["followRequestsUrl"].endswith("/role-sharer/follow-requests")

    async def test_unknown_sharer_is_not_found(self, client: AsyncClient, factory):
        fan = await factory.profile()
        response = await client.post(
            "/api/v1/follow-requests", json={"sharer_id": "missing"}, headers=factory.headers(fan)
        )
        assert response.status_code == 404

    async def test_cannot_follow_yourself(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        response = await _request(client, factory, owner, sharer)
        assert response.status_code == 400

    async def test_second_pending_request_conflicts(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        fan = await factory.profile()
        assert (await _request(client, factory, fan, sharer)).status_code == 201
        assert (await _request(client, factory, fan, sharer)).status_code == 409

    async def test_existing_listener_conflicts(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        listener, _ = await factory.listener(sharer)
        response = await _request(client, factory, listener, sharer)
        assert response.status_code == 409


class TestListFollowRequests:
    async def test_received_requires_sharer_role(self, client: AsyncClient, factory):
        fan = await factory.profile(roles=[Role.LISTENER])
        response = await client.get("/api/v1/follow-requests/received", headers=factory.headers(fan))
        assert response.status_code == 403

    async def test_received_with_status_filter(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        first = await factory.profile(first_name="First")
        second = await factory.profile(first_name="Second")
        approved_id = (await _request(client, factory, first, sharer)).json()["id"]
        await _request(client, factory, second, sharer)
        await client.post(f"/api/v1/follow-requests/{approved_id}/approve", headers=factory.headers(owner))

        everything = await client.get("/api/v1/follow-requests/received", headers=factory.headers(owner))
        assert len(everything.json()) == 2

        pending = await client.get(
            "/api/v1/follow-requests/received", params={"status": "PENDING"}, headers=factory.headers(owner)
        )
        [item] = pending.json()
        assert item["requestor"]["first_name"] == "Second"
        assert item["sharer"]["id"] == owner.id

    async def test_sent_lists_own_requests(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer(first_name="Rosa")
        fan = await factory.profile()
        await _request(client, factory, fan, sharer)

        response = await client.get("/api/v1/follow-requests/sent", headers=factory.headers(fan))
        [item] = response.json()
        assert item["requestor"]["id"] == fan.id
        assert item["sharer"]["first_name"] == "Rosa"


class TestAnswerFollowRequest:
    async def test_approve_links_listener(self, client: AsyncClient, factory, repos):
        owner, sharer = await factory.sharer(first_name="Rosa", last_name="Diaz")
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]

        response = await client.post(f"/api/v1/follow-requests/{request_id}/approve", headers=factory.headers(owner))
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        assert response.json()["approved_at"] is not None

        link = await repos.listeners.get_link(fan.id, sharer.id)
        assert link is not None and link.has_access
        assert await repos.roles.has_role(fan.id, Role.LISTENER)
        [notification] = await repos.notifications.list_for_user(fan.id)
        assert notification.data["changeType"] == "ACCEPTED"
        assert notification.data["role"] == "LISTENER"

    async def test_deny(self, client: AsyncClient, factory, repos):
        owner, sharer = await factory.sharer()
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]

        response = await client.post(f"/api/v1/follow-requests/{request_id}/deny", headers=factory.headers(owner))
        assert response.status_code == 200
        assert response.json()["status"] == "DENIED"
        assert response.json()["denied_at"] is not None
        assert await repos.listeners.get_link(fan.id, sharer.id) is None
        [notification] = await repos.notifications.list_for_user(fan.id)
        assert notification.data["changeType"] == "DECLINED"

    async def test_only_the_sharer_can_answer(self, client: AsyncClient, factory):
        _, sharer = await factory.sharer()
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]
        response = await client.post(f"/api/v1/follow-requests/{request_id}/approve", headers=factory.headers(fan))
        assert response.status_code == 403

    async def test_answered_request_cannot_be_answered_again(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]
        await client.post(f"/api/v1/follow-requests/{request_id}/deny", headers=factory.headers(owner))
        response = await client.post(f"/api/v1/follow-requests/{request_id}/approve", headers=factory.headers(owner))
        assert response.status_code == 400

    async def test_unknown_request_is_not_found(self, client: AsyncClient, factory):
        owner, _ = await factory.sharer()
        response = await client.post("/api/v1/follow-requests/missing/approve", headers=factory.headers(owner))
        assert response.status_code == 404


class TestWithdrawFollowRequest:
    async def test_requestor_withdraws_pending(self, client: AsyncClient, factory, repos):
        _, sharer = await factory.sharer()
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]
        response = await client.delete(f"/api/v1/follow-requests/{request_id}", headers=factory.headers(fan))
        assert response.status_code == 204
        assert await repos.follow_requests.get_by_id(request_id) is None

    async def test_sharer_cannot_withdraw(self, client: AsyncClient, factory):
        owner, sharer = await factory.sharer()
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]
        response = await client.delete(f"/api/v1/follow-requests/{request_id}", headers=factory.headers(owner))
        assert response.status_code == 403

    async def test_approved_request_cannot_be_withdrawn(self, client: AsyncClient, factory, repos):
        owner, sharer = await factory.sharer()
        fan = await factory.profile()
        request_id = (await _request(client, factory, fan, sharer)).json()["id"]
        await client.post(f"/api/v1/follow-requests/{request_id}/approve", headers=factory.headers(owner))
        response = await client.delete(f"/api/v1/follow-requests/{request_id}", headers=factory.headers(fan))
        assert response.status_code == 400
        request = await repos.follow_requests.get_by_id(request_id)
        assert request.status == FollowRequestStatus.APPROVED
