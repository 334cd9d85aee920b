"""Exception types raised by the store client core.

Only lightweight, **data-carrying** exceptions live here so that the CLI
layer can transform them into exit codes or user-friendly messages.  None of
them ever carries a credential; ``to_payload`` is safe to print or log.
"""

from __future__ import annotations

from typing import Any


class StoreError(RuntimeError):
    """Base class for every failure surfaced by the store client."""

    code: str = "store_error"

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.code, "message": str(self)}


class ValidationError(StoreError, ValueError):
    """Malformed caller input, raised before any network call."""

    code = "validation_error"


class AuthError(StoreError):
    """Token endpoint unreachable, or it returned a failure/malformed body."""

    code = "auth_error"

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status: int | None = status

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.status is not None:
            payload["status"] = self.status
        return payload


class HttpError(StoreError):
    """A store endpoint returned a non-success status.

    ``status`` is ``0`` when no HTTP response was received at all
    (connection refused, DNS failure, read timeout).
    """

    code = "http_error"

    def __init__(self, status: int, body: str, *, url: str = "") -> None:
        if status:
            message = f"HTTP {status}: {body}"
        else:
            message = body or "request failed"
        super().__init__(message)
        self.status: int = status
        self.body: str = body
        self.url: str = url

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "status": self.status,
            "body": self.body,
            "url": self.url,
        }


class UploadTimeoutError(StoreError, TimeoutError):
    """Polling for an asynchronous upload exceeded the maximum wait."""

    code = "upload_timeout"

    def __init__(self, item_id: str, waited_seconds: float) -> None:
        super().__init__("Upload timeout: Maximum wait time exceeded")
        self.item_id: str = item_id
        self.waited_seconds: float = waited_seconds

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["item_id"] = self.item_id
        payload["waited_seconds"] = round(self.waited_seconds, 3)
        return payload


class OperationCancelledError(StoreError):
    """A poll or watch loop observed its cancellation event."""

    code = "cancelled"
