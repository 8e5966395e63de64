"""ViewModel binding a :class:`WindowController` to observable state.

One instance drives one scrollable grid.  It mirrors the controller's window
and loading flags into ``ObservableProperty`` objects, turns scroll positions
into load calls and asks the view to compensate its scroll offset after rows
are prepended.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from jobwindow.application.services.window_controller import LoadOutcome, WindowController
from jobwindow.config import COLUMNS_DEFAULT, COLUMNS_WITH_PANEL
from jobwindow.domain.models.core import Direction
from jobwindow.errors.handler import GENERIC_FALLBACK_MESSAGE, ErrorHandler
from jobwindow.events.signal import ObservableProperty, Signal
from jobwindow.gui.viewmodels.base import BaseViewModel
from jobwindow.gui.viewmodels.grid_layout import GridLayout, ScrollMetrics, decide_load


class WindowedListViewModel(BaseViewModel):
    """Observable façade over one windowed list."""

    def __init__(
        self,
        controller: WindowController[Any],
        *,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._config = controller.config
        self._error_handler = error_handler
        self._logger = logging.getLogger(__name__)
        self._synced_error: Optional[str] = None

        # Observable properties
        self.items = ObservableProperty([])
        self.loading = ObservableProperty(False)
        self.loading_next = ObservableProperty(False)
        self.loading_prev = ObservableProperty(False)
        self.reached_end = ObservableProperty(False)
        self.reached_start = ObservableProperty(False)
        self.total_count = ObservableProperty(None)
        self.error = ObservableProperty(None)
        self.not_found = ObservableProperty(False)
        self.columns = ObservableProperty(COLUMNS_DEFAULT)
        self.selected_item = ObservableProperty(None)

        # Signals
        self.items_updated = Signal()
        self.scroll_compensation_requested = Signal()  # emits pixels to add to scrollTop
        self.error_occurred = Signal()

        self._controller.changed.connect(self._sync)
        if self._error_handler is not None:
            self._error_handler.register_reset_callback(self.retry)
        self._sync()

    # -- properties --------------------------------------------------------

    @property
    def controller(self) -> WindowController[Any]:
        return self._controller

    @property
    def layout(self) -> GridLayout:
        return GridLayout(self.columns.value)

    @property
    def row_count(self) -> int:
        return self.layout.row_count(len(self.items.value))

    @property
    def is_empty(self) -> bool:
        return not self.items.value

    def row(self, index: int) -> list[Optional[Any]]:
        return self.layout.row(self.items.value, index)

    # -- loading -----------------------------------------------------------

    async def load_initial(self) -> LoadOutcome:
        return await self._run(self._controller.initial_load)

    async def load_next(self) -> LoadOutcome:
        return await self._run(self._controller.load_next)

    async def load_prev(self) -> LoadOutcome:
        outcome = await self._run(self._controller.load_prev)
        if outcome.applied and outcome.added:
            self.scroll_compensation_requested.emit(
                self.layout.compensation_px(outcome.added, self._config.estimated_row_height_px)
            )
        return outcome

    def on_scroll(self, metrics: ScrollMetrics) -> Optional[asyncio.Task[LoadOutcome]]:
        """Schedule a load when the viewport nears an edge of the window."""
        direction = decide_load(
            metrics, self._config.scroll_load_threshold_px, len(self.items.value)
        )
        if direction is Direction.NEXT:
            return self.track_task(self.load_next())
        if direction is Direction.PREV:
            return self.track_task(self.load_prev())
        return None

    def retry(self) -> None:
        """Start over after the generic fallback error."""
        if self.disposed:
            return
        self.error.value = None
        self._controller.reset()
        try:
            self.track_task(self.load_initial())
        except RuntimeError:
            self._logger.debug("No running loop; initial load deferred")

    # -- layout ------------------------------------------------------------

    def select(self, item: Any) -> None:
        """Open the detail panel for *item*; the grid narrows to two columns."""
        self.selected_item.value = item
        self.columns.value = COLUMNS_WITH_PANEL

    def clear_selection(self) -> None:
        self.selected_item.value = None
        self.columns.value = COLUMNS_DEFAULT

    def dispose(self) -> None:
        self._controller.changed.disconnect(self._sync)
        self._controller.close()
        if self._error_handler is not None:
            self._error_handler.unregister_reset_callback(self.retry)
        super().dispose()

    # -- internal ----------------------------------------------------------

    async def _run(self, operation: Callable[[], Awaitable[LoadOutcome]]) -> LoadOutcome:
        try:
            return await operation()
        except Exception as exc:
            self._logger.error("Unexpected failure in windowed list: %s", exc)
            self.error.value = GENERIC_FALLBACK_MESSAGE
            self.error_occurred.emit(GENERIC_FALLBACK_MESSAGE)
            if self._error_handler is not None:
                self._error_handler.handle_unexpected(exc, {"view": self.__class__.__name__})
            return LoadOutcome.failed(exc)

    def _sync(self) -> None:
        state = self._controller.state
        previous_items = self.items.value
        self.items.value = state.items
        self.loading.value = self._controller.loading_initial
        self.loading_next.value = self._controller.loading_next
        self.loading_prev.value = self._controller.loading_prev
        self.reached_end.value = state.reached_end
        self.reached_start.value = state.reached_start
        self.total_count.value = state.total_count
        self.not_found.value = state.not_found
        if state.error != self._synced_error:
            self._synced_error = state.error
            self.error.value = state.error
            if state.error:
                self.error_occurred.emit(state.error)
        if state.items != previous_items:
            self.items_updated.emit(state.items)
