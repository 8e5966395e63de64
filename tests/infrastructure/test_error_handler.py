import logging
from unittest.mock import Mock

from jobwindow.errors.handler import (
    GENERIC_FALLBACK_MESSAGE,
    ErrorHandler,
    ErrorOccurredEvent,
    ErrorSeverity,
)
from jobwindow.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = ValueError("test error")
    handler.handle(error, ErrorSeverity.ERROR)

    logger.error.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error == error
    assert event.severity == ErrorSeverity.ERROR
    assert handler.has_fallback is False


def test_ui_callback_gets_message_for_errors():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.ERROR)

    callback.assert_called_with("ui error", ErrorSeverity.ERROR)


def test_unexpected_error_shows_generic_fallback():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)
    error = KeyError("internal detail")

    handler.handle_unexpected(error, {"view": "grid"})

    callback.assert_called_with(GENERIC_FALLBACK_MESSAGE, ErrorSeverity.CRITICAL)
    assert handler.has_fallback is True
    assert handler.fallback_error is error


def test_ignore_info_severity_in_ui():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("info"), ErrorSeverity.INFO)

    callback.assert_not_called()


def test_reset_clears_fallback_and_runs_callbacks():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    resets = []
    handler.register_reset_callback(lambda: resets.append("a"))
    handler.register_reset_callback(lambda: resets.append("b"))
    handler.handle_unexpected(RuntimeError("boom"))

    handler.reset()

    assert handler.has_fallback is False
    assert resets == ["a", "b"]


def test_unregistered_reset_callback_is_not_called():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    kept, dropped = Mock(), Mock()
    handler.register_reset_callback(kept)
    handler.register_reset_callback(dropped)

    handler.unregister_reset_callback(dropped)
    handler.unregister_reset_callback(dropped)
    handler.reset()

    kept.assert_called_once_with()
    dropped.assert_not_called()
    assert handler.reset_callback_count == 1
