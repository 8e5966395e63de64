"""Bounded LRU cache of fetched pages keyed by cursor."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class PageCache(Generic[K, V]):
    """LRU cache mapping a cursor token to a previously fetched page.

    Both :meth:`get` hits and :meth:`set` count as a use.  When inserting a new
    key into a full cache, the least-recently-used entry is evicted first.

    The cache is owned by a single window controller on the event loop thread
    and is therefore not synchronised.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("PageCache capacity must be >= 1")
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._capacity = capacity
        self.hits = 0
        self.misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> Optional[V]:
        if key in self._entries:
            self._entries.move_to_end(key)
            self.hits += 1
            return self._entries[key]
        self.misses += 1
        return None

    def set(self, key: K, page: V) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self._capacity:
            self._entries.popitem(last=False)  # evict least recently used
        self._entries[key] = page

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[K]:
        """Keys from least to most recently used."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership checks do not count as a use.
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
