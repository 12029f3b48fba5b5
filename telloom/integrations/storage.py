"""Object storage client.

Creates signed URLs for private objects and removes objects, against the
storage REST API of the hosted project. Requests authenticate with the
service-role key so row-level policies do not apply.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

import httpx

from .errors import StorageApiError


class StorageClient:
    """Thin async HTTP client for the storage REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        service_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a storage client.

        Args:
            base_url: Base URL of the project; ``/storage/v1`` is appended.
            service_key: Service-role key used for ``apikey`` and bearer auth.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def storage_url(self) -> str:
        return f"{self.base_url}/storage/v1"

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.service_key:
            headers["apikey"] = self.service_key
            headers["Authorization"] = f"Bearer {self.service_key}"
        return headers

    async def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        """Create a time-limited download URL for an object.

        API
        ---
        - Method/Path: ``POST /storage/v1/object/sign/{bucket}/{path}``
        - Body: ``{"expiresIn": <seconds>}``

        Args:
            bucket: Bucket name.
            path: Object path inside the bucket.
            expires_in: Lifetime of the URL in seconds.

        Returns:
            Absolute signed URL.

        Raises:
            StorageApiError: When the API answers non-2xx or omits the URL.
        """
        object_path = quote(path.lstrip("/"))
        try:
            r = await self._client.post(
                f"{self.storage_url}/object/sign/{bucket}/{object_path}",
                headers=self._headers(),
                json={"expiresIn": expires_in},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StorageApiError(
                f"Creating signed URL failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise StorageApiError(f"Storage unreachable: {e}") from e
        signed = r.json().get("signedURL") or r.json().get("signedUrl")
        if not signed:
            raise StorageApiError("Storage API returned no signed URL", details=r.text)
        if signed.startswith("http"):
            return signed
        return f"{self.storage_url}/{signed.lstrip('/')}"

    async def remove(self, bucket: str, paths: List[str]) -> None:
        """Delete objects from a bucket.

        API
        ---
        - Method/Path: ``DELETE /storage/v1/object/{bucket}``
        - Body: ``{"prefixes": [<path>, ...]}``

        Raises:
            StorageApiError: When the API answers non-2xx.
        """
        try:
            r = await self._client.request(
                "DELETE",
                f"{self.storage_url}/object/{bucket}",
                headers=self._headers(),
                json={"prefixes": paths},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StorageApiError(
                f"Removing storage objects failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise StorageApiError(f"Storage unreachable: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
