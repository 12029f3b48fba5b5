"""Hosted auth provider client.

Overview
--------
Resolves an access token to the signed-in user by asking the auth provider
(a GoTrue-compatible API) directly, the same check the provider's own SDK
performs with ``auth.getUser()``. No token is decoded locally, so revoked
sessions are rejected immediately.

API
---
- Method/Path: ``GET {SUPABASE_URL}/auth/v1/user``
- Headers: ``apikey: <anon key>``, ``Authorization: Bearer <access token>``
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from telloom.core.errors import AuthenticationError

from .errors import AuthApiError


class AuthUser(BaseModel):
    """The authenticated user as reported by the auth provider."""

    id: str
    email: Optional[str] = None
    app_metadata: Dict[str, Any] = Field(default_factory=dict)
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class AuthClient:
    """Thin async HTTP client for the auth provider's user endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create an auth client.

        Args:
            base_url: Base URL of the auth/storage project (e.g. ``https://xyz.supabase.co``).
            api_key: Public anon key sent as the ``apikey`` header.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def _headers(self, access_token: str) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {access_token}"}
        if self.api_key:
            headers["apikey"] = self.api_key
        return headers

    async def get_user(self, access_token: str) -> AuthUser:
        """Resolve an access token to its user.

        Args:
            access_token: The session's JWT access token.

        Returns:
            ``AuthUser`` for the token.

        Raises:
            AuthenticationError: When the provider rejects the token (401/403).
            AuthApiError: For transport failures or any other non-2xx answer.
        """
        try:
            r = await self._client.get(f"{self.base_url}/auth/v1/user", headers=self._headers(access_token))
        except httpx.HTTPError as e:
            raise AuthApiError(f"Auth provider unreachable: {e}") from e

        if r.status_code in (401, 403):
            self._logger.debug("Auth provider rejected access token: %s", r.status_code)
            raise AuthenticationError("Invalid or expired session")
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AuthApiError(
                f"Auth provider user lookup failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        return AuthUser.model_validate(r.json())

    async def aclose(self) -> None:
        await self._client.aclose()
