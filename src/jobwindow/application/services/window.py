"""Window state and the pure merge functions that mutate it.

The window is the bounded slice of a server-ordered result set currently held
in memory.  Appends drop the oldest prefix and prepends drop the newest suffix
so ``len(items) <= max_size`` always holds, and ids stay unique.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, List, Optional, Protocol, TypeVar

T = TypeVar("T")


def item_id(item: Any) -> str:
    return item.id


@dataclass
class WindowState(Generic[T]):
    items: List[T] = field(default_factory=list)
    forward_cursor: Optional[str] = None
    # Number of server-side items that precede ``items[0]``.
    start_offset: int = 0
    reached_end: bool = False
    reached_start: bool = False
    total_count: Optional[int] = None
    error: Optional[str] = None
    not_found: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class MergeResult(Generic[T]):
    items: List[T]
    added: int
    dropped: int


def _fresh(existing: Iterable[T], incoming: Iterable[T], key: Callable[[T], str]) -> List[T]:
    seen = {key(item) for item in existing}
    fresh: List[T] = []
    for item in incoming:
        ident = key(item)
        if ident in seen:
            continue
        seen.add(ident)
        fresh.append(item)
    return fresh


def append_and_trim(
    items: List[T],
    incoming: Iterable[T],
    max_size: int,
    key: Callable[[T], str] = item_id,
) -> MergeResult[T]:
    """Append *incoming* after *items*, dropping the head beyond *max_size*."""

    fresh = _fresh(items, incoming, key)
    merged = list(items) + fresh
    dropped = max(0, len(merged) - max_size)
    return MergeResult(items=merged[dropped:], added=len(fresh), dropped=dropped)


def prepend_and_trim(
    items: List[T],
    incoming: Iterable[T],
    max_size: int,
    key: Callable[[T], str] = item_id,
) -> MergeResult[T]:
    """Prepend *incoming* before *items*, dropping the tail beyond *max_size*."""

    fresh = _fresh(items, incoming, key)
    merged = fresh + list(items)
    dropped = max(0, len(merged) - max_size)
    return MergeResult(items=merged[:max_size], added=len(fresh), dropped=dropped)


def unique_head(incoming: Iterable[T], max_size: int, key: Callable[[T], str] = item_id) -> List[T]:
    """First *max_size* distinct items of a fresh first page."""
    return _fresh((), incoming, key)[:max_size]


class BackwardKeys(Protocol[T]):
    """How a window names the page before its first item.

    Cursor-keyed listings synthesize the key from the first held item;
    offset-keyed listings remember how many items precede the window.
    """

    def backward_key(self, state: WindowState[T]) -> Optional[str]: ...

    def forward_cursor_after_tail_trim(self, state: WindowState[T]) -> Optional[str]: ...

    def start_reached(self, state: WindowState[T]) -> bool: ...


class SynthesizedCursorKeys(Generic[T]):
    """Keys of the form ``"{sort_key},{id}"`` built from the window edges."""

    def __init__(self, sort_key: Callable[[T], str], key: Callable[[T], str] = item_id) -> None:
        self._sort_key = sort_key
        self._key = key

    def cursor_for(self, item: T) -> str:
        return f"{self._sort_key(item)},{self._key(item)}"

    def backward_key(self, state: WindowState[T]) -> Optional[str]:
        if not state.items:
            return None
        return self.cursor_for(state.items[0])

    def forward_cursor_after_tail_trim(self, state: WindowState[T]) -> Optional[str]:
        if not state.items:
            return None
        return self.cursor_for(state.items[-1])

    def start_reached(self, state: WindowState[T]) -> bool:
        # Only an empty backward page proves the start.
        return False


class StartOffsetKeys(Generic[T]):
    """Keys expressed as the number of items preceding the window."""

    def backward_key(self, state: WindowState[T]) -> Optional[str]:
        if state.start_offset <= 0:
            return None
        return str(state.start_offset)

    def forward_cursor_after_tail_trim(self, state: WindowState[T]) -> Optional[str]:
        return str(state.start_offset + len(state.items))

    def start_reached(self, state: WindowState[T]) -> bool:
        return state.start_offset <= 0
