"""Unit tests for profile and link entity models.

Tests defaults, the display name used in notifications and emails, and that
enum-typed columns come back from the database as plain values.
"""

from __future__ import annotations

import pytest

from telloom.core.database.entities import Invitation, Profile, ProfileListener, ProfileRole, Video
from telloom.core.models.domain.enums import InvitationStatus, Role, VideoStatus


class TestProfileDisplayName:
    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"first_name": "Rosa", "last_name": "Diaz"}, "Rosa Diaz"),
            ({"first_name": "Rosa"}, "Rosa"),
            ({"full_name": "Rosa M. Diaz"}, "Rosa M. Diaz"),
            ({"email": "rosa@example.com"}, "rosa@example.com"),
            ({}, "Someone"),
        ],
    )
    def test_display_name_fallbacks(self, fields, expected):
        assert Profile(id="p-1", **fields).display_name == expected

    def test_repr(self):
        assert repr(Profile(id="p-1", email="a@example.com")) == "Profile(id=p-1, email=a@example.com)"


class TestDefaults:
    def test_listener_link_defaults(self):
        link = ProfileListener(listener_id="p-1", sharer_id="s-1")
        assert link.has_access is True
        assert link.notifications is True
        assert link.last_viewed is None
        assert link.id

    def test_invitation_starts_pending(self):
        invitation = Invitation(sharer_id="s-1", invitee_email="a@example.com", role=Role.LISTENER, token="t")
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.accepted_at is None

    def test_video_starts_waiting(self):
        assert Video(profile_sharer_id="s-1").status == VideoStatus.WAITING

    def test_generated_ids_are_unique(self):
        assert Video(profile_sharer_id="s-1").id != Video(profile_sharer_id="s-1").id


class TestPersistence:
    @pytest.mark.asyncio
    async def test_role_round_trip(self, db, rows):
        profile = await rows.profile()
        await db.roles.create(ProfileRole(profile_id=profile.id, role=Role.EXECUTOR))

        [row] = await db.roles.list(filters={"profile_id": profile.id})
        assert Role(row.role) is Role.EXECUTOR

    @pytest.mark.asyncio
    async def test_status_round_trip(self, db, rows):
        sharer = await rows.sharer()
        video = await db.videos.create(Video(profile_sharer_id=sharer.id, status=VideoStatus.READY))

        loaded = await db.videos.get_by_id(video.id)
        assert loaded.status == VideoStatus.READY
        assert loaded.status == "READY"
