"""Error types raised by the external service clients.

Purpose:
- Provide typed exceptions thrown by the auth, video, email and storage
  clients.
- Expose HTTP-oriented context (status code, error body) for diagnosis.

Usage:
- Catch ``IntegrationApiError`` for any upstream failure and inspect
  ``status_code`` or ``details``.
- Catch the specific subclass when one service needs different handling,
  e.g. tolerating a 404 from ``MuxApiError`` when deleting an asset.
"""

from __future__ import annotations

from typing import Any, Optional


class IntegrationApiError(Exception):
    """Base error for external API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the server (e.g., JSON body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthApiError(IntegrationApiError):
    """Raised when the hosted auth provider cannot be reached or answers unexpectedly."""


class MuxApiError(IntegrationApiError):
    """Raised for non-2xx answers from the video API."""


class EmailApiError(IntegrationApiError):
    """Raised when a transactional email could not be sent."""


class StorageApiError(IntegrationApiError):
    """Raised for non-2xx answers from the object storage API."""


class WebhookVerificationError(IntegrationApiError):
    """Raised when a webhook signature header is missing, malformed, stale or wrong."""
