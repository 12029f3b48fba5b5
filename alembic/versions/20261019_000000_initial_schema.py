"""Initial schema for Telloom

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

This is the initial migration that creates every table of the Telloom
service:
- Profiles, role membership and the sharer / listener / executor links
- Invitations, follow requests and notifications
- Topics (prompt categories), prompts and topic bookmarks
- Prompt responses with attachments, favourites and watch history
- Videos and their transcripts

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    # Create profiles table (id is the auth provider's user id)
    op.create_table(
        "profiles",
        _id(),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("first_name", sa.String(128), nullable=True),
        sa.Column("last_name", sa.String(128), nullable=True),
        sa.Column("full_name", sa.String(256), nullable=True),
        sa.Column("username", sa.String(128), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("address_street", sa.String(256), nullable=True),
        sa.Column("address_unit", sa.String(64), nullable=True),
        sa.Column("address_city", sa.String(128), nullable=True),
        sa.Column("address_state", sa.String(2), nullable=True),
        sa.Column("address_zipcode", sa.String(16), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_profiles_email", "email"),
    )

    # Create profile_roles table
    op.create_table(
        "profile_roles",
        _id(),
        sa.Column("profile_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "role", name="uq_profile_roles_profile_role"),
        sa.Index("ix_profile_roles_profile_id", "profile_id"),
    )

    # Create profile_sharers table
    op.create_table(
        "profile_sharers",
        _id(),
        sa.Column("profile_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("subscription_status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_profile_sharers_profile_id", "profile_id", unique=True),
    )

    # Create profile_listeners table
    op.create_table(
        "profile_listeners",
        _id(),
        sa.Column("listener_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("shared_since", sa.DateTime(timezone=True), nullable=False),
        sa.Column("has_access", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_viewed", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notifications", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("listener_id", "sharer_id", name="uq_profile_listeners_pair"),
        sa.Index("ix_profile_listeners_listener_id", "listener_id"),
        sa.Index("ix_profile_listeners_sharer_id", "sharer_id"),
    )

    # Create profile_executors table
    op.create_table(
        "profile_executors",
        _id(),
        sa.Column("sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("executor_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sharer_id", "executor_id", name="uq_profile_executors_pair"),
        sa.Index("ix_profile_executors_sharer_id", "sharer_id"),
        sa.Index("ix_profile_executors_executor_id", "executor_id"),
    )

    # Create invitations table
    op.create_table(
        "invitations",
        _id(),
        sa.Column("sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("inviter_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("invitee_email", sa.String(320), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("executor_first_name", sa.String(128), nullable=True),
        sa.Column("executor_last_name", sa.String(128), nullable=True),
        sa.Column("executor_phone", sa.String(32), nullable=True),
        sa.Column("executor_relation", sa.String(64), nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_invitations_sharer_id", "sharer_id"),
        sa.Index("ix_invitations_invitee_email", "invitee_email"),
        sa.Index("ix_invitations_status", "status"),
        sa.Index("ix_invitations_token", "token", unique=True),
        sa.Index("ix_invitations_created_at", "created_at"),
    )

    # Create follow_requests table
    op.create_table(
        "follow_requests",
        _id(),
        sa.Column("requestor_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("denied_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_follow_requests_requestor_id", "requestor_id"),
        sa.Index("ix_follow_requests_sharer_id", "sharer_id"),
        sa.Index("ix_follow_requests_status", "status"),
        sa.Index("ix_follow_requests_created_at", "created_at"),
    )

    # Create notifications table
    op.create_table(
        "notifications",
        _id(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_type", "type"),
        sa.Index("ix_notifications_is_read", "is_read"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    # Create prompt_categories table (topics)
    op.create_table(
        "prompt_categories",
        _id(),
        sa.Column("category", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("theme", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_prompt_categories_category", "category"),
    )

    # Create prompts table
    op.create_table(
        "prompts",
        _id(),
        sa.Column("prompt_text", sa.Text(), nullable=False),
        sa.Column("prompt_type", sa.String(64), nullable=True),
        sa.Column("is_context_establishing", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_object_prompt", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("prompt_category_id", sa.String(36), sa.ForeignKey("prompt_categories.id"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_prompts_prompt_category_id", "prompt_category_id"),
    )

    # Create topic_favorites and topic_queue_items tables (same shape)
    for table, constraint in (
        ("topic_favorites", "uq_topic_favorites_scope"),
        ("topic_queue_items", "uq_topic_queue_items_scope"),
    ):
        op.create_table(
            table,
            _id(),
            sa.Column("profile_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
            sa.Column("prompt_category_id", sa.String(36), sa.ForeignKey("prompt_categories.id"), nullable=False),
            sa.Column("role", sa.String(16), nullable=True),
            sa.Column("sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=True),
            sa.Column("executor_id", sa.String(36), sa.ForeignKey("profile_executors.id"), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("profile_id", "prompt_category_id", "role", "sharer_id", name=constraint),
            sa.Index(f"ix_{table}_profile_id", "profile_id"),
            sa.Index(f"ix_{table}_prompt_category_id", "prompt_category_id"),
        )

    # Create videos table
    op.create_table(
        "videos",
        _id(),
        sa.Column("profile_sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("prompt_id", sa.String(36), sa.ForeignKey("prompts.id"), nullable=True),
        sa.Column("mux_upload_id", sa.String(128), nullable=True),
        sa.Column("mux_asset_id", sa.String(128), nullable=True),
        sa.Column("mux_playback_id", sa.String(128), nullable=True),
        sa.Column("passthrough", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("duration", sa.Float(), nullable=True),
        sa.Column("aspect_ratio", sa.String(16), nullable=True),
        sa.Column("video_quality", sa.String(32), nullable=True),
        sa.Column("resolution_tier", sa.String(16), nullable=True),
        sa.Column("max_width", sa.Integer(), nullable=True),
        sa.Column("max_height", sa.Integer(), nullable=True),
        sa.Column("max_frame_rate", sa.Float(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_videos_profile_sharer_id", "profile_sharer_id"),
        sa.Index("ix_videos_prompt_id", "prompt_id"),
        sa.Index("ix_videos_mux_upload_id", "mux_upload_id", unique=True),
        sa.Index("ix_videos_mux_asset_id", "mux_asset_id"),
        sa.Index("ix_videos_status", "status"),
    )

    # Create video_transcripts table
    op.create_table(
        "video_transcripts",
        _id(),
        sa.Column("video_id", sa.String(36), sa.ForeignKey("videos.id"), nullable=False),
        sa.Column("transcript", sa.Text(), nullable=False, server_default=""),
        sa.Column("language", sa.String(16), nullable=True),
        sa.Column("name", sa.String(128), nullable=True),
        sa.Column("mux_asset_id", sa.String(128), nullable=True),
        sa.Column("mux_track_id", sa.String(128), nullable=True),
        sa.Column("source", sa.String(32), nullable=True),
        sa.Column("type", sa.String(32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("mux_track_id"),
        sa.Index("ix_video_transcripts_video_id", "video_id"),
    )

    # Create prompt_responses table
    op.create_table(
        "prompt_responses",
        _id(),
        sa.Column("profile_sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("prompt_id", sa.String(36), sa.ForeignKey("prompts.id"), nullable=True),
        sa.Column("video_id", sa.String(36), sa.ForeignKey("videos.id"), nullable=True),
        sa.Column("response_notes", sa.Text(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("privacy_level", sa.String(16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_sharer_id", "prompt_id", name="uq_prompt_responses_sharer_prompt"),
        sa.Index("ix_prompt_responses_profile_sharer_id", "profile_sharer_id"),
        sa.Index("ix_prompt_responses_prompt_id", "prompt_id"),
    )

    # Create prompt_response_attachments table
    op.create_table(
        "prompt_response_attachments",
        _id(),
        sa.Column("prompt_response_id", sa.String(36), sa.ForeignKey("prompt_responses.id"), nullable=False),
        sa.Column("profile_sharer_id", sa.String(36), sa.ForeignKey("profile_sharers.id"), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_type", sa.String(128), nullable=False),
        sa.Column("file_name", sa.String(512), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(256), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("date_captured", sa.Date(), nullable=True),
        sa.Column("year_captured", sa.Integer(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_prompt_response_attachments_prompt_response_id", "prompt_response_id"),
        sa.Index("ix_prompt_response_attachments_profile_sharer_id", "profile_sharer_id"),
    )

    # Create prompt_response_favorites table
    op.create_table(
        "prompt_response_favorites",
        _id(),
        sa.Column("profile_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("prompt_response_id", sa.String(36), sa.ForeignKey("prompt_responses.id"), nullable=False),
        sa.Column("favorited_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "prompt_response_id", name="uq_prompt_response_favorites_pair"),
        sa.Index("ix_prompt_response_favorites_profile_id", "profile_id"),
        sa.Index("ix_prompt_response_favorites_prompt_response_id", "prompt_response_id"),
    )

    # Create prompt_response_recently_watched table
    op.create_table(
        "prompt_response_recently_watched",
        _id(),
        sa.Column("profile_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("prompt_response_id", sa.String(36), sa.ForeignKey("prompt_responses.id"), nullable=False),
        sa.Column("watched_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "prompt_response_id", name="uq_recently_watched_pair"),
        sa.Index("ix_prompt_response_recently_watched_profile_id", "profile_id"),
        sa.Index("ix_prompt_response_recently_watched_prompt_response_id", "prompt_response_id"),
        sa.Index("ix_prompt_response_recently_watched_watched_at", "watched_at"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("prompt_response_recently_watched")
    op.drop_table("prompt_response_favorites")
    op.drop_table("prompt_response_attachments")
    op.drop_table("prompt_responses")
    op.drop_table("video_transcripts")
    op.drop_table("videos")
    op.drop_table("topic_queue_items")
    op.drop_table("topic_favorites")
    op.drop_table("prompts")
    op.drop_table("prompt_categories")
    op.drop_table("notifications")
    op.drop_table("follow_requests")
    op.drop_table("invitations")
    op.drop_table("profile_executors")
    op.drop_table("profile_listeners")
    op.drop_table("profile_sharers")
    op.drop_table("profile_roles")
    op.drop_table("profiles")
