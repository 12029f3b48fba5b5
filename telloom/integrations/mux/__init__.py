"""Mux video API integration: HTTP client and webhook verification."""

from .client import Asset, DirectUpload, MuxClient
from .webhooks import SIGNATURE_HEADER, MuxWebhookEvent, compute_signature, verify_webhook_signature

__all__ = [
    "Asset",
    "DirectUpload",
    "MuxClient",
    "MuxWebhookEvent",
    "SIGNATURE_HEADER",
    "compute_signature",
    "verify_webhook_signature",
]
