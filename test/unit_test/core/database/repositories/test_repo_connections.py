"""Unit tests for invitation, follow request and notification repositories."""

from __future__ import annotations

from datetime import timedelta

import pytest

from telloom.core.database.base import utc_now
from telloom.core.database.entities import FollowRequest, Invitation, Notification
from telloom.core.models.domain.enums import FollowRequestStatus, InvitationStatus, Role

pytestmark = pytest.mark.asyncio


def _invitation(sharer_id: str, email: str = "guest@example.com", **fields) -> Invitation:
    fields.setdefault("role", Role.LISTENER)
    fields.setdefault("token", f"tok-{email}-{fields['role'].value}-{fields.get('status', 'P')}")
    return Invitation(sharer_id=sharer_id, invitee_email=email, **fields)


class TestInvitationRepository:
    async def test_get_by_token_with_status(self, db, rows):
        sharer = await rows.sharer()
        invitation = await db.invitations.create(_invitation(sharer.id, token="abc"))

        assert (await db.invitations.get_by_token("abc")).id == invitation.id
        assert (await db.invitations.get_by_token("abc", InvitationStatus.PENDING)).id == invitation.id
        assert await db.invitations.get_by_token("abc", InvitationStatus.ACCEPTED) is None
        assert await db.invitations.get_by_token("nope") is None

    async def test_find_pending_matches_email_case_insensitively(self, db, rows):
        sharer = await rows.sharer()
        invitation = await db.invitations.create(_invitation(sharer.id, email="Guest@Example.com"))

        found = await db.invitations.find_pending(sharer.id, "guest@example.com", Role.LISTENER)
        assert found.id == invitation.id
        assert await db.invitations.find_pending(sharer.id, "guest@example.com", Role.EXECUTOR) is None

    async def test_find_pending_skips_settled(self, db, rows):
        sharer = await rows.sharer()
        await db.invitations.create(_invitation(sharer.id, status=InvitationStatus.DECLINED))
        assert await db.invitations.find_pending(sharer.id, "guest@example.com", Role.LISTENER) is None

    async def test_pending_for_email_newest_first(self, db, rows):
        first_sharer = await rows.sharer()
        second_sharer = await rows.sharer()
        start = utc_now()
        older = await db.invitations.create(_invitation(first_sharer.id, created_at=start - timedelta(hours=1)))
        newer = await db.invitations.create(_invitation(second_sharer.id, role=Role.EXECUTOR, created_at=start))
        await db.invitations.create(_invitation(first_sharer.id, role=Role.EXECUTOR, status=InvitationStatus.ACCEPTED))

        pending = await db.invitations.list_pending_for_email("GUEST@example.com")
        assert [i.id for i in pending] == [newer.id, older.id]
        assert len(await db.invitations.list_for_sharer(first_sharer.id)) == 2


class TestFollowRequestRepository:
    async def test_get_for_pair_by_status(self, db, rows):
        sharer = await rows.sharer()
        requestor = await rows.profile()
        denied = await db.follow_requests.create(
            FollowRequest(requestor_id=requestor.id, sharer_id=sharer.id, status=FollowRequestStatus.DENIED)
        )
        pending = await db.follow_requests.create(FollowRequest(requestor_id=requestor.id, sharer_id=sharer.id))

        found = await db.follow_requests.get_for_pair(requestor.id, sharer.id, FollowRequestStatus.PENDING)
        assert found.id == pending.id
        found = await db.follow_requests.get_for_pair(requestor.id, sharer.id, FollowRequestStatus.DENIED)
        assert found.id == denied.id
        assert await db.follow_requests.get_for_pair(requestor.id, sharer.id, FollowRequestStatus.APPROVED) is None

    async def test_list_for_sharer_filtered(self, db, rows):
        sharer = await rows.sharer()
        first = await rows.profile()
        second = await rows.profile()
        await db.follow_requests.create(FollowRequest(requestor_id=first.id, sharer_id=sharer.id))
        await db.follow_requests.create(
            FollowRequest(requestor_id=second.id, sharer_id=sharer.id, status=FollowRequestStatus.APPROVED)
        )

        assert len(await db.follow_requests.list_for_sharer(sharer.id)) == 2
        [approved] = await db.follow_requests.list_for_sharer(sharer.id, FollowRequestStatus.APPROVED)
        assert approved.requestor_id == second.id
        assert len(await db.follow_requests.list_for_requestor(first.id)) == 1


class TestNotificationRepository:
    @pytest.fixture
    async def user(self, rows):
        return await rows.profile()

    async def _notify(self, db, user_id: str, minutes: int = 0, is_read: bool = False) -> Notification:
        return await db.notifications.create(
            Notification(
                user_id=user_id,
                type="FOLLOW_REQUEST",
                message="Someone wants to follow you",
                data={"n": minutes},
                is_read=is_read,
                created_at=utc_now() + timedelta(minutes=minutes),
            )
        )

    async def test_list_newest_first_with_limit(self, db, user):
        for minutes in range(3):
            await self._notify(db, user.id, minutes)

        listed = await db.notifications.list_for_user(user.id)
        assert [n.data["n"] for n in listed] == [2, 1, 0]
        assert len(await db.notifications.list_for_user(user.id, limit=2)) == 2

    async def test_count_unread(self, db, user, rows):
        other = await rows.profile()
        await self._notify(db, user.id)
        await self._notify(db, user.id, is_read=True)
        await self._notify(db, other.id)

        assert await db.notifications.count_unread(user.id) == 1

    async def test_mark_read_ignores_foreign_ids(self, db, user, rows):
        other = await rows.profile()
        mine = await self._notify(db, user.id)
        theirs = await self._notify(db, other.id)

        assert await db.notifications.mark_read(user.id, [mine.id, theirs.id]) == 1
        assert await db.notifications.mark_read(user.id, []) == 0
        assert await db.notifications.count_unread(other.id) == 1

    async def test_mark_all_read(self, db, user):
        await self._notify(db, user.id)
        await self._notify(db, user.id, 1)
        await self._notify(db, user.id, 2, is_read=True)

        assert await db.notifications.mark_all_read(user.id) == 2
        assert await db.notifications.count_unread(user.id) == 0
