"""
Error types raised while relaying a generation request.

Every error carries the HTTP status it maps to and renders the flat JSON
envelope the UI reads (`error`, optional `details`, plus any extra keys).
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class VideoGenError(Exception):
    """Base class for all errors returned to API clients."""

    def __init__(
        self,
        message: str,
        code: str,
        http_status: int = 500,
        details: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.details = details
        self.extra = extra or {}

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class InvalidRequestError(VideoGenError):
    def __init__(
        self,
        message: str = "Invalid request data",
        details: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "INVALID_REQUEST", 400, details, extra)


class EmptyOutputError(VideoGenError):
    """A task finished but returned no output URL."""

    def __init__(self, stage: str, extra: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            f"{stage.capitalize()} generation failed - no output received",
            "EMPTY_OUTPUT",
            500,
            extra=extra,
        )
        self.stage = stage


class GenerationTaskFailedError(VideoGenError):
    def __init__(self, details: str, task_id: Optional[str] = None) -> None:
        super().__init__("Task failed", "TASK_FAILED", 500, details)
        self.task_id = task_id


class GenerationTimeoutError(VideoGenError):
    def __init__(self, details: str) -> None:
        super().__init__("Task timed out", "TASK_TIMEOUT", 504, details)


class UpstreamAPIError(VideoGenError):
    def __init__(self, details: str, upstream_status: Optional[int] = None) -> None:
        super().__init__("Generation service error", "UPSTREAM_ERROR", 502, details)
        self.upstream_status = upstream_status
