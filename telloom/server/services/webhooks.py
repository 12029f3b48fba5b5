"""
Video pipeline webhook handling.

Each delivery is verified, matched to a ``Video`` row and applied as a
status transition. Statuses only move forward: WAITING -> PREPARING ->
READY, with ERRORED terminal for an upload. A READY video never regresses.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import ValidationError

from telloom.core.database.entities.responses import PromptResponse
from telloom.core.database.entities.videos import Video, VideoTranscript
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import TelloomError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import VideoStatus
from telloom.core.models.io.videos import WebhookAck
from telloom.core.monitoring import log_webhook_event
from telloom.integrations.errors import MuxApiError
from telloom.integrations.mux import MuxClient, MuxWebhookEvent, verify_webhook_signature
from telloom.server.core.config import settings

logger = get_logger(__name__)

_NEXT_STATES: Dict[VideoStatus, set[VideoStatus]] = {
    VideoStatus.WAITING: {VideoStatus.PREPARING, VideoStatus.ASSET_CREATED, VideoStatus.READY, VideoStatus.ERRORED},
    VideoStatus.ASSET_CREATED: {VideoStatus.PREPARING, VideoStatus.READY, VideoStatus.ERRORED},
    VideoStatus.PREPARING: {VideoStatus.READY, VideoStatus.ERRORED},
    VideoStatus.READY: set(),
    VideoStatus.ERRORED: set(),
}

ERROR_EVENTS = {"video.asset.errored", "video.upload.errored", "video.upload.cancelled"}


def can_transition(current: VideoStatus, target: VideoStatus) -> bool:
    """Whether a video in ``current`` may move to ``target``. Same-state moves are no-ops."""
    current, target = VideoStatus(current), VideoStatus(target)
    return current == target or target in _NEXT_STATES[current]


def _advance(video: Video, target: VideoStatus) -> bool:
    if not can_transition(video.status, target):
        logger.warning(f"Ignoring {VideoStatus(video.status).value} -> {target.value} for video {video.id}")
        return False
    video.status = target
    return True


async def locate_video(repos: TelloomRepoBundle, event: MuxWebhookEvent) -> Optional[Video]:
    """Find the video an event refers to: by upload id, then asset id, then passthrough ``videoId``."""
    data = event.data
    if event.type.startswith("video.upload."):
        upload_id, asset_id = data.get("id"), data.get("asset_id")
    elif event.type.startswith("video.asset.track."):
        upload_id, asset_id = None, data.get("asset_id")
    else:
        upload_id, asset_id = data.get("upload_id"), data.get("id")

    if upload_id:
        video = await repos.videos.get_by_upload_id(upload_id)
        if video is not None:
            return video
    if asset_id:
        video = await repos.videos.get_by_asset_id(asset_id)
        if video is not None:
            return video
    video_id = event.passthrough.get("videoId")
    if video_id:
        return await repos.videos.get_by_id(str(video_id))
    return None


def _track(data: Dict[str, Any], kind: str) -> Dict[str, Any]:
    for track in data.get("tracks") or []:
        if track.get("type") == kind:
            return track
    return {}


def _apply_asset_metadata(video: Video, data: Dict[str, Any]) -> None:
    playback_ids = data.get("playback_ids") or []
    if playback_ids:
        video.mux_playback_id = playback_ids[0].get("id")
    video.mux_asset_id = data.get("id") or video.mux_asset_id
    video.duration = data.get("duration")
    video.aspect_ratio = data.get("aspect_ratio")
    video.video_quality = data.get("video_quality")
    video.resolution_tier = data.get("resolution_tier")
    video_track = _track(data, "video")
    video.max_width = video_track.get("max_width")
    video.max_height = video_track.get("max_height")
    video.max_frame_rate = video_track.get("max_frame_rate")


async def _link_response(repos: TelloomRepoBundle, video: Video) -> None:
    if video.prompt_id is None:
        return
    response = await repos.responses.get_for_prompt(video.profile_sharer_id, video.prompt_id)
    if response is None:
        await repos.responses.create(
            PromptResponse(profile_sharer_id=video.profile_sharer_id, prompt_id=video.prompt_id, video_id=video.id)
        )
    elif response.video_id != video.id:
        response.video_id = video.id
        await repos.responses.update(response)


async def _store_transcript(repos: TelloomRepoBundle, mux: MuxClient, video: Video, data: Dict[str, Any]) -> bool:
    if data.get("type") != "text":
        return False
    track_id = data.get("id")
    if not track_id:
        return False

    text = ""
    if video.mux_playback_id:
        try:
            text = await mux.get_text_track(video.mux_playback_id, track_id)
        except MuxApiError as e:
            logger.error(f"Fetching transcript track {track_id} for video {video.id} failed: {e}")

    existing = await repos.transcripts.get_by_track_id(track_id)
    transcript = existing or VideoTranscript(video_id=video.id, mux_track_id=track_id)
    transcript.transcript = text or transcript.transcript
    transcript.language = data.get("language_code")
    transcript.name = data.get("name")
    transcript.mux_asset_id = data.get("asset_id") or video.mux_asset_id
    transcript.source = data.get("text_source")
    transcript.type = data.get("text_type")
    if existing is not None:
        await repos.transcripts.update(transcript)
    else:
        await repos.transcripts.create(transcript)
    return True


async def apply_event(repos: TelloomRepoBundle, mux: MuxClient, event: MuxWebhookEvent) -> WebhookAck:
    """Apply one verified event. Unknown videos and event types are acknowledged and ignored."""
    video = await locate_video(repos, event)
    if video is None:
        logger.warning(f"No video for {event.type} event {event.id}")
        log_webhook_event(event.type, None, "ignored")
        return WebhookAck(ignored=True, event_type=event.type)

    data = event.data
    handled = True
    if event.type == "video.upload.asset_created":
        video.mux_asset_id = data.get("asset_id") or video.mux_asset_id
        _advance(video, VideoStatus.PREPARING)
    elif event.type == "video.asset.created":
        video.mux_asset_id = data.get("id") or video.mux_asset_id
        playback_ids = data.get("playback_ids") or []
        if playback_ids and not video.mux_playback_id:
            video.mux_playback_id = playback_ids[0].get("id")
        _advance(video, VideoStatus.PREPARING)
    elif event.type == "video.asset.ready":
        if _advance(video, VideoStatus.READY):
            _apply_asset_metadata(video, data)
    elif event.type in ERROR_EVENTS:
        _advance(video, VideoStatus.ERRORED)
    elif event.type == "video.asset.track.ready":
        handled = await _store_transcript(repos, mux, video, data)
    else:
        handled = False

    if not handled:
        logger.info(f"Unhandled {event.type} event for video {video.id}")
        log_webhook_event(event.type, video.id, "ignored")
        return WebhookAck(ignored=True, event_type=event.type)

    video = await repos.videos.update(video)
    if event.type == "video.asset.ready" and video.status == VideoStatus.READY:
        await _link_response(repos, video)
    logger.info(f"Applied {event.type} to video {video.id}: {VideoStatus(video.status).value}")
    log_webhook_event(event.type, video.id, VideoStatus(video.status).value)
    return WebhookAck(event_type=event.type)


async def handle_mux_webhook(
    repos: TelloomRepoBundle, mux: MuxClient, raw_body: bytes, signature: Optional[str]
) -> WebhookAck:
    """Verify and apply a webhook delivery.

    Raises:
        TelloomError: The signing secret is not configured (500).
        WebhookVerificationError: Missing, stale or invalid signature (400).
    """
    secret = settings.mux.webhook_secret
    if not secret:
        raise TelloomError("Webhook secret is not configured", status_code=500)
    verify_webhook_signature(raw_body, signature, secret, settings.webhook_tolerance_seconds)
    try:
        event = MuxWebhookEvent.model_validate_json(raw_body)
    except ValidationError as e:
        raise TelloomError("Invalid webhook payload") from e
    return await apply_event(repos, mux, event)
