"""Transactional email client for the Loops API.

Overview
--------
Sends templated transactional emails. Templates live in Loops and are
referenced by their transactional id; the caller supplies the data
variables each template expects.

API
---
- Method/Path: ``POST {LOOPS_BASE_URL}/transactional``
- Auth: ``Authorization: Bearer <api key>``
- Body: ``{"transactionalId", "email", "dataVariables"}``
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import EmailApiError

logger = logging.getLogger(__name__)


class LoopsClient:
    """Thin async HTTP client for Loops transactional email."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def send_transactional_email(
        self, transactional_id: Optional[str], email: str, data_variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Send one transactional email.

        Args:
            transactional_id: Id of the Loops template.
            email: Recipient address.
            data_variables: Values substituted into the template.

        Returns:
            Parsed JSON answer from Loops (``{"success": true}`` on success).

        Raises:
            EmailApiError: When the client is not configured or Loops answers non-2xx.
        """
        if not self.api_key or not transactional_id:
            raise EmailApiError("Transactional email is not configured")
        payload = {"transactionalId": transactional_id, "email": email, "dataVariables": data_variables}
        try:
            r = await self._client.post(f"{self.base_url}/transactional", headers=self._headers(), json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmailApiError(
                f"Loops transactional email failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise EmailApiError(f"Loops unreachable: {e}") from e
        logger.info(f"Sent transactional email {transactional_id}")
        try:
            return r.json()
        except ValueError:
            return {"success": True}

    async def aclose(self) -> None:
        await self._client.aclose()


async def send_invitation_email(
    client: LoopsClient,
    *,
    transactional_id: Optional[str],
    invitee_email: str,
    inviter_name: str,
    inviter_email: str,
    role: str,
    app_url: str,
    token: str,
) -> Dict[str, Any]:
    """Send the email inviting someone to connect with a sharer.

    The link points at the front end's accept page carrying the invitation token.
    """
    invite_url = f"{app_url.rstrip('/')}/invitation/accept?token={token}"
    return await client.send_transactional_email(
        transactional_id,
        invitee_email,
        {"inviterName": inviter_name, "inviterEmail": inviter_email, "role": role, "inviteUrl": invite_url},
    )


async def send_follow_request_email(
    client: LoopsClient,
    *,
    transactional_id: Optional[str],
    sharer_email: str,
    sharer_name: str,
    requestor_name: str,
    requestor_email: str,
    app_url: str,
) -> Dict[str, Any]:
    """Tell a sharer that someone asked to follow them."""
    follow_requests_url = f"{app_url.rstrip('/')}/role-sharer/follow-requests"
    return await client.send_transactional_email(
        transactional_id,
        sharer_email,
        {
            "sharerName": sharer_name,
            "requestorName": requestor_name,
            "requestorEmail": requestor_email,
            "followRequestsUrl": follow_requests_url,
        },
    )
