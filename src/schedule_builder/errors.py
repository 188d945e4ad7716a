from __future__ import annotations

from typing import Optional


class ScheduleError(RuntimeError):
    """Base class for errors surfaced to the presentation layer."""


class ShareError(ScheduleError):
    """Raised when sharing or loading a remote snapshot fails."""

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class InvalidSchedulePayload(ValueError):
    """Raised by the share backend when a submitted document fails validation."""


__all__ = ["InvalidSchedulePayload", "ScheduleError", "ShareError"]
