"""Custom exception hierarchy for jobwindow."""

from __future__ import annotations

from typing import Any


class JobWindowError(Exception):
    """Base class for all custom errors raised by jobwindow."""


# --- 3-layer hierarchy ---

class DomainError(JobWindowError):
    """Base class for domain-level errors."""


class InfrastructureError(JobWindowError):
    """Base class for infrastructure-level errors."""


class ApplicationError(JobWindowError):
    """Base class for application-level errors."""


# --- Domain errors ---

class UploadValidationError(DomainError):
    """Raised when a resume is too large or of an unsupported type."""


# --- Infrastructure errors ---

class ApiError(InfrastructureError):
    """Raised when the API answers with a non-success status code."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    @classmethod
    def from_response(cls, status: int, payload: Any, fallback: str) -> "ApiError":
        """Build the most specific error for *status* from a decoded body."""

        message = message_from_payload(payload) or fallback
        if status == 404:
            return NotFoundError(status, message)
        if status >= 500:
            return ServerError(status, message)
        return cls(status, message)


class NotFoundError(ApiError):
    """Raised on 404: the resource does not exist or is not owned by the caller."""


class ServerError(ApiError):
    """Raised on 5xx responses."""


class TransportError(InfrastructureError):
    """Raised when a request never produced a usable response."""


# --- Application errors ---

class JobFailedError(ApplicationError):
    """Raised when a background match job reports ``failed``."""


# --- Settings errors ---

class SettingsError(JobWindowError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


def message_from_payload(payload: Any) -> str | None:
    """Extract a human readable message from an error body."""

    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail")
    if isinstance(detail, list) and detail and isinstance(detail[0], dict) and "msg" in detail[0]:
        return str(detail[0]["msg"])
    if isinstance(detail, str) and detail:
        return detail
    error = payload.get("error")
    if isinstance(error, str) and error:
        return error
    return None
