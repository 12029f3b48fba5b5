"""
Video Endpoints.

The browser uploads recordings straight to the video host. This API
reserves the row, hands out the upload URL, reports processing status and
serves download links once the video is ready.
"""

from fastapi import APIRouter, Query, Response, status

from telloom.core.models.io.videos import DownloadResponse, UploadUrlRequest, UploadUrlResponse, VideoRead
from telloom.server.services import videos as video_service
from telloom.server.services.deps import CurrentProfileDep, MuxClientDep, ReposDep

router = APIRouter()


@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Upload URL",
    description="Reserve a video for a prompt and get a direct upload URL.",
    responses={
        403: {"description": "Caller does not manage the sharer"},
        409: {"description": "A video already exists for this prompt"},
        502: {"description": "The video host rejected the upload"},
    },
)
async def create_upload_url(
    data: UploadUrlRequest, profile: CurrentProfileDep, repos: ReposDep, mux: MuxClientDep
) -> UploadUrlResponse:
    """
    Create an upload URL.

    The video starts WAITING and advances as the host reports progress
    through webhooks. A prompt can only have one video that is not ERRORED.
    """
    return await video_service.create_upload_url(repos, mux, profile, data)


@router.get(
    "/by-upload/{upload_id}",
    response_model=VideoRead,
    summary="Get Video By Upload",
    description="Poll the status of a video by the upload id returned from ``upload-url``.",
)
async def get_video_by_upload(upload_id: str, profile: CurrentProfileDep, repos: ReposDep) -> VideoRead:
    return VideoRead.model_validate(await video_service.get_video_by_upload(repos, profile, upload_id))


@router.get("/{video_id}", response_model=VideoRead, summary="Get Video")
async def get_video(video_id: str, profile: CurrentProfileDep, repos: ReposDep) -> VideoRead:
    return VideoRead.model_validate(await video_service.get_video(repos, profile, video_id))


@router.delete(
    "/{video_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Video",
    description="Delete the hosted asset, transcripts and the video, and unlink it from its response.",
)
async def delete_video(video_id: str, profile: CurrentProfileDep, repos: ReposDep, mux: MuxClientDep) -> Response:
    await video_service.delete_video(repos, mux, profile, video_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{video_id}/download",
    response_model=DownloadResponse,
    summary="Get Download URL",
    description="A static MP4 rendition URL for a READY video.",
    responses={400: {"description": "Not ready, or renditions still being generated"}},
)
async def download_video(
    video_id: str,
    profile: CurrentProfileDep,
    repos: ReposDep,
    mux: MuxClientDep,
    quality: str = Query(default=video_service.DEFAULT_DOWNLOAD_QUALITY, description="audio, 480p, 720p, 1080p or original"),
) -> DownloadResponse:
    """
    Get a download URL.

    Renditions are generated on first request, so the first call for a
    video answers 400 and later calls return the link.
    """
    return await video_service.download_video(repos, mux, profile, video_id, quality)
