"""BaseViewModel: pure Python, no Qt dependency.

Provides subscription and background-task lifecycle management so that
concrete ViewModels can subscribe to ``EventBus`` events and schedule
coroutines, and have both cleaned up via ``dispose()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Type

from jobwindow.events.bus import EventBus, Subscription

_logger = logging.getLogger(__name__)


class BaseViewModel:
    """ViewModel base class without any Qt dependency."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def track_task(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Schedule *coro* on the running loop and keep a reference until done."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise
        task = loop.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @property
    def pending_tasks(self) -> list[asyncio.Task[Any]]:
        return list(self._background_tasks)

    async def drain(self) -> None:
        """Wait until every tracked background task has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    @staticmethod
    def _on_task_done(task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    def dispose(self) -> None:
        """Cancel all tracked event subscriptions and background tasks."""
        self._disposed = True
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        for task in list(self._background_tasks):
            task.cancel()
