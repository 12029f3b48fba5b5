"""Mux webhook signature verification and event payloads.

The ``mux-signature`` header has the form ``t=<unix ts>,v1=<hex digest>``
where the digest is HMAC-SHA256 over ``"<ts>.<raw body>"`` keyed with the
webhook signing secret. Deliveries older than the tolerance are rejected.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import WebhookVerificationError

SIGNATURE_HEADER = "mux-signature"
DEFAULT_TOLERANCE_SECONDS = 300


def compute_signature(raw_body: bytes, timestamp: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"<timestamp>.<body>"``."""
    message = timestamp.encode() + b"." + raw_body
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def _parse_header(header: str) -> tuple[str, list[str]]:
    timestamp = ""
    signatures: list[str] = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def verify_webhook_signature(
    raw_body: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    *,
    clock: Callable[[], float] = time.time,
) -> None:
    """Verify a webhook delivery.

    Args:
        raw_body: The request body exactly as received.
        header: Value of the ``mux-signature`` header.
        secret: Webhook signing secret.
        tolerance: Maximum accepted age of the signed timestamp, in seconds.
        clock: Source of the current unix time.

    Raises:
        WebhookVerificationError: When the header is missing or malformed, the
            timestamp is outside the tolerance, or no signature matches.
    """
    if not header:
        raise WebhookVerificationError("Missing mux-signature header", status_code=400)

    timestamp, signatures = _parse_header(header)
    if not timestamp or not signatures:
        raise WebhookVerificationError("Malformed mux-signature header", status_code=400)
    try:
        signed_at = int(timestamp)
    except ValueError as e:
        raise WebhookVerificationError("Malformed mux-signature timestamp", status_code=400) from e

    if abs(clock() - signed_at) > tolerance:
        raise WebhookVerificationError("Webhook timestamp outside tolerance", status_code=400)

    expected = compute_signature(raw_body, timestamp, secret)
    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        raise WebhookVerificationError("Invalid webhook signature", status_code=400)


class MuxWebhookEvent(BaseModel):
    """Envelope of a Mux webhook delivery."""

    model_config = ConfigDict(extra="allow")

    type: str
    id: Optional[str] = None
    created_at: Optional[str] = None
    object: Dict[str, Any] = Field(default_factory=dict)
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def passthrough(self) -> Dict[str, Any]:
        """Decoded passthrough JSON from the payload, or ``{}`` when absent or not JSON."""
        raw = self.data.get("passthrough")
        if raw is None:
            raw = (self.data.get("new_asset_settings") or {}).get("passthrough")
        if not raw:
            return {}
        try:
            decoded = json.loads(raw)
        except (TypeError, ValueError):
            return {}
        return decoded if isinstance(decoded, dict) else {}
