import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


GENERIC_FALLBACK_MESSAGE = "Something went wrong."


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Last line of defence for errors no component handled locally.

    Unexpected errors put the handler into a fallback state which the UI shows
    as a generic message with a "try again" action wired to :meth:`reset`.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None
        self._reset_callbacks: list[Callable[[], None]] = []
        self._fallback_error: Optional[Exception] = None

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._ui_callback = callback

    def register_reset_callback(self, callback: Callable[[], None]):
        self._reset_callbacks.append(callback)

    def unregister_reset_callback(self, callback: Callable[[], None]):
        if callback in self._reset_callbacks:
            self._reset_callbacks.remove(callback)

    @property
    def reset_callback_count(self) -> int:
        return len(self._reset_callbacks)

    @property
    def has_fallback(self) -> bool:
        return self._fallback_error is not None

    @property
    def fallback_error(self) -> Optional[Exception]:
        return self._fallback_error

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        # Log the error
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method(f"{error.__class__.__name__}: {error}", extra={"context": context or {}})

        if severity is ErrorSeverity.CRITICAL:
            self._fallback_error = error

        # Publish event
        self._events.publish(ErrorOccurredEvent(
            error=error,
            severity=severity,
            context=context or {}
        ))

        # Notify UI
        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            message = str(error) if severity is ErrorSeverity.ERROR else GENERIC_FALLBACK_MESSAGE
            self._ui_callback(message, severity)

    def handle_unexpected(self, error: Exception, context: dict = None):
        """Route an error nobody anticipated to the generic fallback."""
        self.handle(error, ErrorSeverity.CRITICAL, context)

    def reset(self):
        """Clear the fallback state and let registered views start over."""
        self._fallback_error = None
        for callback in list(self._reset_callbacks):
            callback()
