"""
Webhook Endpoints.

Receives video pipeline events. There is no session: deliveries are
authenticated by their HMAC signature over the raw body.
"""

from typing import Optional

from fastapi import APIRouter, Header, Request

from telloom.core.models.io.videos import WebhookAck
from telloom.server.services import webhooks as webhook_service
from telloom.server.services.deps import MuxClientDep, ReposDep

router = APIRouter()


@router.post(
    "/mux",
    response_model=WebhookAck,
    summary="Receive Video Webhook",
    description="Verify and apply a video pipeline event.",
    responses={
        400: {"description": "Missing or invalid signature"},
        500: {"description": "Webhook secret not configured"},
    },
)
async def receive_mux_webhook(
    request: Request,
    repos: ReposDep,
    mux: MuxClientDep,
    mux_signature: Optional[str] = Header(default=None, alias="mux-signature"),
) -> WebhookAck:
    """
    Receive a video webhook.

    Events for unknown videos, and event types that need no action, are
    acknowledged with ``ignored: true`` so the sender does not retry.
    """
    raw_body = await request.body()
    return await webhook_service.handle_mux_webhook(repos, mux, raw_body, mux_signature)
