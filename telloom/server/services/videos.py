"""
Video ingestion: direct uploads, status polling, deletion and downloads.
"""

from __future__ import annotations

import json
from typing import Optional

from telloom.core.database.entities.profiles import Profile
from telloom.core.database.entities.videos import Video
from telloom.core.database.repositories import TelloomRepoBundle
from telloom.core.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError
from telloom.core.logging_config import get_logger
from telloom.core.models.domain.enums import VideoStatus
from telloom.core.models.io.videos import DownloadResponse, UploadUrlRequest, UploadUrlResponse
from telloom.integrations.errors import MuxApiError
from telloom.integrations.mux import Asset, MuxClient
from telloom.server.core.config import settings

from .access import can_view_sharer, resolve_acting_sharer

logger = get_logger(__name__)

DOWNLOAD_QUALITIES = ("audio", "480p", "720p", "1080p", "original")
DEFAULT_DOWNLOAD_QUALITY = "720p"


def build_passthrough(video: Video) -> str:
    return json.dumps(
        {"videoId": video.id, "promptId": video.prompt_id, "profileSharerId": video.profile_sharer_id},
        separators=(",", ":"),
    )


async def create_upload_url(
    repos: TelloomRepoBundle, mux: MuxClient, profile: Profile, data: UploadUrlRequest
) -> UploadUrlResponse:
    """Reserve a video row and ask the video API for a direct upload URL.

    Raises:
        ConflictError: A non-errored video already exists for this prompt and sharer.
        MuxApiError: The upload could not be created; the row is left ERRORED.
    """
    ctx = await resolve_acting_sharer(repos, profile, data.sharer_id)
    if await repos.prompts.get_by_id(data.prompt_id) is None:
        raise NotFoundError("Prompt", data.prompt_id)
    existing = await repos.videos.get_active_for_prompt(ctx.sharer.id, data.prompt_id)
    if existing is not None:
        raise ConflictError(
            "A video already exists for this prompt", extra={"video_id": existing.id, "status": existing.status}
        )

    video = Video(profile_sharer_id=ctx.sharer.id, prompt_id=data.prompt_id, status=VideoStatus.WAITING)
    video.passthrough = build_passthrough(video)
    video = await repos.videos.create(video)

    try:
        upload = await mux.create_direct_upload(passthrough=video.passthrough, cors_origin=settings.mux.cors_origin)
    except MuxApiError:
        video.status = VideoStatus.ERRORED
        await repos.videos.update(video)
        logger.error(f"Direct upload for video {video.id} failed")
        raise

    video.mux_upload_id = upload.id
    video = await repos.videos.update(video)
    logger.info(f"Video {video.id} waiting on upload {upload.id} ({ctx.role.value})")
    return UploadUrlResponse(upload_url=upload.url or "", upload_id=upload.id, video_id=video.id)


async def _viewable(repos: TelloomRepoBundle, profile: Profile, video: Optional[Video], identifier: str) -> Video:
    if video is None:
        raise NotFoundError("Video", identifier)
    sharer = await repos.sharers.get_by_id(video.profile_sharer_id)
    if sharer is None or not await can_view_sharer(repos, profile, sharer):
        raise PermissionDeniedError("Not authorized to view this video")
    return video


async def get_video(repos: TelloomRepoBundle, profile: Profile, video_id: str) -> Video:
    return await _viewable(repos, profile, await repos.videos.get_by_id(video_id), video_id)


async def get_video_by_upload(repos: TelloomRepoBundle, profile: Profile, upload_id: str) -> Video:
    return await _viewable(repos, profile, await repos.videos.get_by_upload_id(upload_id), upload_id)


async def delete_video(repos: TelloomRepoBundle, mux: MuxClient, profile: Profile, video_id: str) -> None:
    """Delete the hosted asset (a missing asset is fine), transcripts, the response link and the row."""
    video = await repos.videos.get_by_id(video_id)
    if video is None:
        raise NotFoundError("Video", video_id)
    await resolve_acting_sharer(repos, profile, video.profile_sharer_id)

    if video.mux_asset_id:
        try:
            await mux.delete_asset(video.mux_asset_id)
        except MuxApiError as e:
            if e.status_code != 404:
                raise
            logger.warning(f"Asset {video.mux_asset_id} of video {video.id} was already gone")

    response = await repos.responses.get_by_video_id(video.id)
    if response is not None:
        response.video_id = None
        await repos.responses.update(response)
    for transcript in await repos.transcripts.list_for_video(video.id):
        await repos.transcripts.delete(transcript.id)
    await repos.videos.delete(video.id)
    logger.info(f"Deleted video {video.id}")


def _pick_rendition(asset: Asset, quality: str) -> str:
    if quality == "audio":
        return "audio.m4a"
    if quality != "original":
        return f"{quality}.mp4"
    files = asset.static_renditions.files if asset.static_renditions else []
    names = [f.get("name") for f in files if f.get("name")]
    if "1080p.mp4" in names:
        return "1080p.mp4"
    if not names:
        raise InvalidStateError("No video renditions available for download")
    return names[0]


async def download_video(
    repos: TelloomRepoBundle, mux: MuxClient, profile: Profile, video_id: str, quality: str = DEFAULT_DOWNLOAD_QUALITY
) -> DownloadResponse:
    """Return a static MP4 rendition URL for a READY video.

    MP4 renditions are generated on demand: the first request turns them on
    and reports that the video is still processing.
    """
    if quality not in DOWNLOAD_QUALITIES:
        raise InvalidStateError(f"Unsupported quality {quality!r}")
    video = await get_video(repos, profile, video_id)
    if video.status != VideoStatus.READY or not video.mux_asset_id:
        raise InvalidStateError("Video is not ready for download")

    asset = await mux.get_asset(video.mux_asset_id)
    if not asset.mp4_support or asset.mp4_support == "none":
        await mux.enable_mp4_support(asset.id)
        logger.info(f"Enabled MP4 renditions for asset {asset.id}")
        raise InvalidStateError("Video is still being processed. Please try again in a few moments.")
    if asset.static_renditions is None or asset.static_renditions.status != "ready":
        raise InvalidStateError("Video is still being processed. Please try again in a few moments.")

    playback_id = video.mux_playback_id or (asset.playback_ids[0].id if asset.playback_ids else None)
    if not playback_id:
        raise InvalidStateError("Video has no playback id")
    return DownloadResponse(
        video_id=video.id, download_url=mux.download_url(playback_id, _pick_rendition(asset, quality)), quality=quality
    )
