"""Windowed bidirectional pagination over a cursor-paged listing.

``WindowController`` keeps a bounded in-memory window of a server-ordered
result set.  It loads forward and backward pages on demand, serves repeat
requests from a per-window LRU page cache and trims the window so it never
exceeds ``window_max_items``.

All mutation happens on the event loop thread.  At most one request per
direction is in flight; opposite directions may overlap.  Each continuation
re-checks a generation counter after awaiting so that a reset, reload or
teardown discards late responses instead of applying them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from jobwindow.application.services.window import (
    BackwardKeys,
    WindowState,
    append_and_trim,
    prepend_and_trim,
    unique_head,
)
from jobwindow.config import INITIAL_CACHE_KEY, WindowConfig
from jobwindow.domain.models.core import Direction, Page
from jobwindow.domain.models.query import PageQuery
from jobwindow.errors import ApiError, NotFoundError, TransportError
from jobwindow.events.signal import Signal
from jobwindow.infrastructure.services.page_cache import PageCache

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[PageQuery], Awaitable[Page[T]]]

SKIP_CLOSED = "closed"
SKIP_IN_FLIGHT = "in_flight"
SKIP_JOB_IN_FLIGHT = "job_in_flight"
SKIP_REACHED_END = "reached_end"
SKIP_REACHED_START = "reached_start"
SKIP_NO_CURSOR = "no_cursor"
SKIP_EMPTY = "empty"
SKIP_STALE = "stale"
SKIP_SUPERSEDED = "superseded"


def _cache_key(direction: Direction, cursor: str) -> str:
    # Offset tokens mean different pages in each direction.
    return f"{direction.value}:{cursor}"


@dataclass(frozen=True)
class LoadOutcome:
    """What a single load call did to the window."""

    direction: Optional[Direction] = None
    applied: bool = False
    added: int = 0
    dropped: int = 0
    from_cache: bool = False
    not_found: bool = False
    skipped_reason: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def skipped(cls, reason: str, direction: Optional[Direction] = None) -> "LoadOutcome":
        return cls(direction=direction, skipped_reason=reason)

    @classmethod
    def failed(cls, error: Exception, direction: Optional[Direction] = None) -> "LoadOutcome":
        return cls(direction=direction, error=error)


class WindowController(Generic[T]):
    """Own and mutate one pagination window.

    Parameters
    ----------
    fetch_page:
        Coroutine function issuing one cursor request.
    keys:
        Strategy naming the page before the window's first item.
    initial_load_guard:
        Returns ``True`` while :meth:`initial_load` must be skipped, e.g. when
        a background match job will replace the result set shortly.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        keys: BackwardKeys[T],
        *,
        config: Optional[WindowConfig] = None,
        cache: Optional[PageCache[str, Page[T]]] = None,
        initial_load_guard: Optional[Callable[[], bool]] = None,
        domain: Optional[str] = None,
        name: str = "window",
    ) -> None:
        self._fetch_page = fetch_page
        self._keys = keys
        self._config = config or WindowConfig()
        self._cache: PageCache[str, Page[T]] = cache or PageCache(
            self._config.cache_capacity_pages
        )
        self._initial_load_guard = initial_load_guard
        self._domain = domain
        self._name = name

        # State
        self._state: WindowState[T] = WindowState()
        self._loading_initial = False
        self._loading_next = False
        self._loading_prev = False
        self._generation = 0
        self._closed = False

        # Emitted after every state or loading-flag change.
        self.changed = Signal()

    # -- properties --------------------------------------------------------

    @property
    def state(self) -> WindowState[T]:
        """Snapshot of the current window."""
        return replace(self._state, items=list(self._state.items))

    @property
    def items(self) -> List[T]:
        return list(self._state.items)

    @property
    def cache(self) -> PageCache[str, Page[T]]:
        return self._cache

    @property
    def config(self) -> WindowConfig:
        return self._config

    @property
    def loading_initial(self) -> bool:
        return self._loading_initial

    @property
    def loading_next(self) -> bool:
        return self._loading_next

    @property
    def loading_prev(self) -> bool:
        return self._loading_prev

    @property
    def closed(self) -> bool:
        return self._closed

    # -- lifecycle ---------------------------------------------------------

    def reset(self) -> None:
        """Discard the window and cache; late responses are ignored."""
        self._generation += 1
        self._loading_initial = False
        self._loading_next = False
        self._loading_prev = False
        self._cache.clear()
        self._state = WindowState()
        self.changed.emit()

    def close(self) -> None:
        """Tear the controller down; nothing is applied afterwards."""
        self._closed = True
        self._generation += 1
        self._loading_initial = False
        self._loading_next = False
        self._loading_prev = False

    # -- public API --------------------------------------------------------

    async def initial_load(self) -> LoadOutcome:
        """Fetch the first forward page and install it as the window.

        A 404 is the neutral "nothing yet" state rather than an error.
        Transport and server failures are recorded on ``state.error``.
        """
        if self._closed:
            return LoadOutcome.skipped(SKIP_CLOSED, Direction.NEXT)
        if self._initial_load_guard is not None and self._initial_load_guard():
            LOGGER.debug("%s: initial load skipped, match job in flight", self._name)
            return LoadOutcome.skipped(SKIP_JOB_IN_FLIGHT, Direction.NEXT)
        if self._loading_initial:
            return LoadOutcome.skipped(SKIP_IN_FLIGHT, Direction.NEXT)

        generation = self._generation
        self._loading_initial = True
        self._state.error = None
        self.changed.emit()
        try:
            page = await self._fetch_page(self._query(None, Direction.NEXT))
        except NotFoundError as exc:
            if not self._is_current(generation):
                return LoadOutcome.skipped(SKIP_STALE, Direction.NEXT)
            LOGGER.info("%s: no results yet (%s)", self._name, exc)
            self._state = WindowState(
                reached_end=True, reached_start=True, not_found=True
            )
            return LoadOutcome(direction=Direction.NEXT, not_found=True)
        except (ApiError, TransportError) as exc:
            if not self._is_current(generation):
                return LoadOutcome.skipped(SKIP_STALE, Direction.NEXT)
            LOGGER.warning("%s: initial load failed: %s", self._name, exc)
            self._state.error = str(exc) or "Failed to load results."
            return LoadOutcome.failed(exc, Direction.NEXT)
        finally:
            if self._is_current(generation):
                self._loading_initial = False
                self.changed.emit()

        if not self._is_current(generation):
            return LoadOutcome.skipped(SKIP_STALE, Direction.NEXT)
        return self._install_first_page(page)

    async def reload(self) -> LoadOutcome:
        """Replace the window wholesale with a freshly fetched first page.

        Bypasses the initial-load guard.  Fetch failures propagate to the
        caller; the window is left empty in that case.
        """
        if self._closed:
            return LoadOutcome.skipped(SKIP_CLOSED, Direction.NEXT)
        self.reset()
        generation = self._generation
        self._loading_initial = True
        self.changed.emit()
        try:
            page = await self._fetch_page(self._query(None, Direction.NEXT))
        finally:
            if self._is_current(generation):
                self._loading_initial = False
                self.changed.emit()

        if not self._is_current(generation):
            return LoadOutcome.skipped(SKIP_STALE, Direction.NEXT)
        return self._install_first_page(page)

    async def load_next(self) -> LoadOutcome:
        """Append the page after the window's last item."""
        if self._closed:
            return LoadOutcome.skipped(SKIP_CLOSED, Direction.NEXT)
        if self._loading_next:
            return LoadOutcome.skipped(SKIP_IN_FLIGHT, Direction.NEXT)
        if self._state.reached_end:
            return LoadOutcome.skipped(SKIP_REACHED_END, Direction.NEXT)
        cursor = self._state.forward_cursor
        if not cursor:
            return LoadOutcome.skipped(SKIP_NO_CURSOR, Direction.NEXT)

        cache_key = _cache_key(Direction.NEXT, cursor)
        cached = self._cache.get(cache_key)
        if cached is not None:
            LOGGER.debug("%s: next page for %r served from cache", self._name, cursor)
            return self._apply_next(cached, from_cache=True)

        generation = self._generation
        self._loading_next = True
        self.changed.emit()
        try:
            page = await self._fetch_page(self._query(cursor, Direction.NEXT))
        except (ApiError, TransportError) as exc:
            # Cursor is kept so the next scroll trigger retries.
            LOGGER.warning("%s: loading next page failed: %s", self._name, exc)
            return LoadOutcome.failed(exc, Direction.NEXT)
        finally:
            if self._is_current(generation):
                self._loading_next = False
                self.changed.emit()

        if not self._is_current(generation):
            return LoadOutcome.skipped(SKIP_STALE, Direction.NEXT)
        self._cache.set(cache_key, page)
        if self._state.forward_cursor != cursor:
            LOGGER.debug("%s: forward cursor moved while loading, page dropped", self._name)
            return LoadOutcome.skipped(SKIP_SUPERSEDED, Direction.NEXT)
        return self._apply_next(page, from_cache=False)

    async def load_prev(self) -> LoadOutcome:
        """Prepend the page before the window's first item."""
        if self._closed:
            return LoadOutcome.skipped(SKIP_CLOSED, Direction.PREV)
        if self._loading_prev:
            return LoadOutcome.skipped(SKIP_IN_FLIGHT, Direction.PREV)
        if self._state.reached_start:
            return LoadOutcome.skipped(SKIP_REACHED_START, Direction.PREV)
        if not self._state.items:
            return LoadOutcome.skipped(SKIP_EMPTY, Direction.PREV)
        key = self._keys.backward_key(self._state)
        if key is None:
            return LoadOutcome.skipped(SKIP_NO_CURSOR, Direction.PREV)

        cache_key = _cache_key(Direction.PREV, key)
        cached = self._cache.get(cache_key)
        if cached is not None:
            LOGGER.debug("%s: previous page for %r served from cache", self._name, key)
            return self._apply_prev(cached, from_cache=True)

        generation = self._generation
        self._loading_prev = True
        self.changed.emit()
        try:
            page = await self._fetch_page(self._query(key, Direction.PREV))
        except (ApiError, TransportError) as exc:
            LOGGER.warning("%s: loading previous page failed: %s", self._name, exc)
            return LoadOutcome.failed(exc, Direction.PREV)
        finally:
            if self._is_current(generation):
                self._loading_prev = False
                self.changed.emit()

        if not self._is_current(generation):
            return LoadOutcome.skipped(SKIP_STALE, Direction.PREV)
        self._cache.set(cache_key, page)
        if self._keys.backward_key(self._state) != key:
            LOGGER.debug("%s: window head moved while loading, page dropped", self._name)
            return LoadOutcome.skipped(SKIP_SUPERSEDED, Direction.PREV)
        return self._apply_prev(page, from_cache=False)

    # -- internal ----------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _query(self, cursor: Optional[str], direction: Direction) -> PageQuery:
        query = PageQuery().with_limit(self._config.page_size).in_domain(self._domain)
        if direction is Direction.PREV and cursor is not None:
            return query.before(cursor)
        return query.after(cursor)

    def _install_first_page(self, page: Page[T]) -> LoadOutcome:
        items = unique_head(page.items, self._config.window_max_items)
        self._state = WindowState(
            items=items,
            forward_cursor=page.next_cursor,
            start_offset=0,
            reached_end=page.next_cursor is None,
            reached_start=True,
            total_count=page.total_count,
        )
        if items:
            self._cache.set(INITIAL_CACHE_KEY, page)
        LOGGER.debug("%s: first page installed with %d items", self._name, len(items))
        self.changed.emit()
        return LoadOutcome(
            direction=Direction.NEXT,
            applied=True,
            added=len(items),
            dropped=len(page.items) - len(items),
        )

    def _apply_next(self, page: Page[T], *, from_cache: bool) -> LoadOutcome:
        state = self._state
        merged = append_and_trim(state.items, page.items, self._config.window_max_items)
        state.items = merged.items
        if merged.dropped:
            state.start_offset += merged.dropped
            state.reached_start = False
        state.forward_cursor = page.next_cursor
        state.reached_end = page.next_cursor is None
        if page.total_count is not None:
            state.total_count = page.total_count
        if merged.dropped:
            LOGGER.debug("%s: trimmed %d items from the head", self._name, merged.dropped)
        self.changed.emit()
        return LoadOutcome(
            direction=Direction.NEXT,
            applied=True,
            added=merged.added,
            dropped=merged.dropped,
            from_cache=from_cache,
        )

    def _apply_prev(self, page: Page[T], *, from_cache: bool) -> LoadOutcome:
        state = self._state
        if page.is_empty:
            state.reached_start = True
            state.start_offset = 0
            self.changed.emit()
            return LoadOutcome(direction=Direction.PREV, applied=True, from_cache=from_cache)

        merged = prepend_and_trim(state.items, page.items, self._config.window_max_items)
        state.items = merged.items
        state.start_offset = max(0, state.start_offset - merged.added)
        if merged.dropped:
            state.reached_end = False
            state.forward_cursor = self._keys.forward_cursor_after_tail_trim(state)
            LOGGER.debug("%s: trimmed %d items from the tail", self._name, merged.dropped)
        if merged.added == 0:
            # Nothing new before the head; asking again would repeat forever.
            LOGGER.info("%s: backward page overlapped the window, treating as start", self._name)
            state.reached_start = True
        elif self._keys.start_reached(state):
            state.reached_start = True
        self.changed.emit()
        return LoadOutcome(
            direction=Direction.PREV,
            applied=True,
            added=merged.added,
            dropped=merged.dropped,
            from_cache=from_cache,
        )


__all__ = [
    "LoadOutcome",
    "PageFetcher",
    "WindowController",
]
