"""Domain error types.

Services raise these; the server's exception handlers translate them into
JSON responses carrying ``status_code`` and ``detail``.
"""

from __future__ import annotations

from typing import Any, Optional


class TelloomError(Exception):
    """Base error for all domain failures surfaced to API clients."""

    status_code: int = 400

    def __init__(self, detail: str, *, status_code: Optional[int] = None, extra: Optional[dict[str, Any]] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}


class AuthenticationError(TelloomError):
    """Raised when no valid session accompanies the request."""

    status_code = 401


class PermissionDeniedError(TelloomError):
    """Raised when the caller lacks the role or relationship an action needs."""

    status_code = 403


class NotFoundError(TelloomError):
    """Raised when a referenced row does not exist or is not visible."""

    status_code = 404

    def __init__(self, entity: str, identifier: Optional[str] = None) -> None:
        message = f"{entity} not found" if identifier is None else f"{entity} '{identifier}' not found"
        super().__init__(message)
        self.entity = entity
        self.identifier = identifier


class ConflictError(TelloomError):
    """Raised when a write would duplicate an existing row."""

    status_code = 409


class InvalidStateError(TelloomError):
    """Raised when a workflow row is not in a state that allows the action."""

    status_code = 400
