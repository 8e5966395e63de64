"""Callback signals used between the window controller, view models and views.

Everything runs on the asyncio loop thread, so there is no locking here.
``ObservableProperty`` backs the bindable fields of the view models (items,
column count, loading flags, error text).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Ordered list of callbacks invoked inline by :meth:`emit`.

    A failing handler is logged and skipped so that, for example, a broken
    Qt model adapter cannot stop the view model from seeing a window change.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []

    def connect(self, handler: Callable) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: Callable) -> None:
        """Remove *handler*; disposing twice leaves nothing to remove."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            _logger.debug("Handler %r was not connected", handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in list(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc, exc_info=exc)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)


class ObservableProperty:
    """Bindable value; emits ``changed(new_value, old_value)`` on change.

    Equality decides "change", so assigning an equal list of listings is
    silent and views do not reset for a no-op sync.
    """

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self.changed.emit(new_value, old_value)
