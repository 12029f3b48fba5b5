"""Mux video API client

Overview
--------
Thin async HTTP client for the parts of the Mux Video API the ingestion
flow uses: direct uploads, asset lookup and deletion, MP4 rendition support
and generated text tracks (transcripts).

Authentication
--------------
HTTP basic auth with the access token id and secret.

Errors
------
Every non-2xx answer is raised as ``MuxApiError`` carrying the status code
and body, so callers can tolerate specific codes (e.g. 404 on delete).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..errors import MuxApiError

logger = logging.getLogger(__name__)

STREAM_BASE_URL = "https://stream.mux.com"


class DirectUpload(BaseModel):
    """A direct upload as returned by ``POST /video/v1/uploads``."""

    model_config = ConfigDict(extra="allow")

    id: str
    url: Optional[str] = None
    status: Optional[str] = None
    asset_id: Optional[str] = None


class PlaybackId(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    policy: Optional[str] = None


class StaticRenditions(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    files: list[Dict[str, Any]] = Field(default_factory=list)


class Asset(BaseModel):
    """The subset of a Mux asset the service reads."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: Optional[str] = None
    duration: Optional[float] = None
    aspect_ratio: Optional[str] = None
    mp4_support: Optional[str] = None
    playback_ids: list[PlaybackId] = Field(default_factory=list)
    static_renditions: Optional[StaticRenditions] = None
    passthrough: Optional[str] = None


class MuxClient:
    """Thin async HTTP client for the Mux Video API."""

    def __init__(
        self,
        base_url: str = "https://api.mux.com",
        *,
        token_id: Optional[str] = None,
        token_secret: Optional[str] = None,
        stream_base_url: str = STREAM_BASE_URL,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a Mux API client.

        Args:
            base_url: Base URL of the Mux API.
            token_id: Access token id (basic auth user).
            token_secret: Access token secret (basic auth password).
            stream_base_url: Base URL of the playback CDN, used for text tracks and downloads.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.base_url = base_url.rstrip("/")
        self.stream_base_url = stream_base_url.rstrip("/")
        self._auth = httpx.BasicAuth(token_id, token_secret) if token_id and token_secret else None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            r = await self._client.request(method, f"{self.base_url}{path}", auth=self._auth, **kwargs)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MuxApiError(
                f"Mux {method} {path} failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise MuxApiError(f"Mux unreachable: {e}") from e
        return r

    async def create_direct_upload(self, *, passthrough: str, cors_origin: str = "*") -> DirectUpload:
        """Create a direct upload URL the browser can PUT the recording to.

        API
        ---
        - Method/Path: ``POST /video/v1/uploads``
        - Body: ``cors_origin`` and ``new_asset_settings`` with a public
          playback policy and the given ``passthrough``.

        Returns:
            ``DirectUpload`` with the upload ``id`` and ``url``.
        """
        body = {
            "cors_origin": cors_origin,
            "new_asset_settings": {"playback_policy": ["public"], "passthrough": passthrough},
        }
        r = await self._request("POST", "/video/v1/uploads", json=body)
        upload = DirectUpload.model_validate(r.json()["data"])
        logger.info(f"Created Mux direct upload {upload.id}")
        return upload

    async def get_asset(self, asset_id: str) -> Asset:
        """Fetch an asset (``GET /video/v1/assets/{asset_id}``)."""
        r = await self._request("GET", f"/video/v1/assets/{asset_id}")
        return Asset.model_validate(r.json()["data"])

    async def delete_asset(self, asset_id: str) -> None:
        """Delete an asset (``DELETE /video/v1/assets/{asset_id}``)."""
        await self._request("DELETE", f"/video/v1/assets/{asset_id}")
        logger.info(f"Deleted Mux asset {asset_id}")

    async def enable_mp4_support(self, asset_id: str, mp4_support: str = "standard") -> Asset:
        """Turn on static MP4 renditions (``PUT /video/v1/assets/{asset_id}/mp4-support``)."""
        r = await self._request("PUT", f"/video/v1/assets/{asset_id}/mp4-support", json={"mp4_support": mp4_support})
        return Asset.model_validate(r.json()["data"])

    async def get_text_track(self, playback_id: str, track_id: str) -> str:
        """Download a generated text track as plain text.

        API
        ---
        - Method/Path: ``GET {stream}/{playback_id}/text/{track_id}.txt``

        Returns:
            The transcript text.
        """
        url = f"{self.stream_base_url}/{playback_id}/text/{track_id}.txt"
        try:
            r = await self._client.get(url)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MuxApiError(
                f"Fetching text track {track_id} failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise MuxApiError(f"Mux stream unreachable: {e}") from e
        return r.text

    def download_url(self, playback_id: str, rendition: str) -> str:
        """Build the static-rendition download URL for a playback id."""
        return f"{self.stream_base_url}/{playback_id}/{rendition}?download=1"

    async def aclose(self) -> None:
        await self._client.aclose()
