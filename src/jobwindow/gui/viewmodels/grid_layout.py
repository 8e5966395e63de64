"""Column-aware row mapping and the scroll trigger policy.

The window is shown as rows of ``columns`` cells; the column count changes
with the layout (e.g. when a detail panel opens) without reloading data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from jobwindow.domain.models.core import Direction

T = TypeVar("T")


@dataclass(frozen=True)
class GridLayout:
    columns: int

    def __post_init__(self) -> None:
        if self.columns < 1:
            raise ValueError("columns must be >= 1")

    def row_count(self, item_count: int) -> int:
        return math.ceil(item_count / self.columns) if item_count > 0 else 0

    def item_at(self, items: Sequence[T], row: int, column: int) -> Optional[T]:
        """Item shown at (*row*, *column*), or ``None`` for a placeholder cell."""
        if row < 0 or not 0 <= column < self.columns:
            return None
        index = row * self.columns + column
        if index < len(items):
            return items[index]
        return None

    def row(self, items: Sequence[T], row: int) -> list[Optional[T]]:
        """All cells of *row*, padded with ``None`` placeholders."""
        return [self.item_at(items, row, column) for column in range(self.columns)]

    def position_of(self, index: int) -> tuple[int, int]:
        return divmod(index, self.columns)

    def extent_px(self, item_count: int, row_height: int) -> int:
        return self.row_count(item_count) * row_height

    def compensation_px(self, prepended: int, row_height: int) -> int:
        """Scroll offset that keeps the viewport steady after a prepend.

        Based on the estimated row height, so it is approximate by nature.
        """
        return self.row_count(prepended) * row_height


@dataclass(frozen=True)
class ScrollMetrics:
    scroll_top: float
    client_height: float
    scroll_height: float


def decide_load(metrics: ScrollMetrics, threshold: int, item_count: int) -> Optional[Direction]:
    """Which edge, if any, the viewport is close enough to load past.

    The trailing edge wins when both are within the threshold.
    """
    if item_count == 0:
        return None
    if metrics.scroll_top + metrics.client_height >= metrics.scroll_height - threshold:
        return Direction.NEXT
    if metrics.scroll_top < threshold:
        return Direction.PREV
    return None
