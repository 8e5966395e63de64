"""Tests for GridLayout and the scroll trigger policy."""

import pytest

from jobwindow.domain.models.core import Direction
from jobwindow.gui.viewmodels.grid_layout import GridLayout, ScrollMetrics, decide_load


class TestGridLayout:
    def test_row_count(self):
        layout = GridLayout(3)
        assert layout.row_count(0) == 0
        assert layout.row_count(3) == 1
        assert layout.row_count(7) == 3

    def test_last_row_padded_with_placeholders(self):
        layout = GridLayout(3)
        items = list("abcdefg")
        assert layout.row(items, 2) == ["g", None, None]
        assert layout.item_at(items, 1, 1) == "e"
        assert layout.item_at(items, 5, 0) is None

    def test_column_change_remaps_without_new_data(self):
        items = list("abcdefg")
        assert GridLayout(2).row(items, 1) == ["c", "d"]
        assert GridLayout(2).row_count(len(items)) == 4

    def test_position_of(self):
        assert GridLayout(3).position_of(7) == (2, 1)

    def test_compensation_is_whole_rows(self):
        layout = GridLayout(3)
        assert layout.compensation_px(50, 280) == 17 * 280
        assert layout.extent_px(6, 100) == 200

    def test_rejects_zero_columns(self):
        with pytest.raises(ValueError):
            GridLayout(0)


class TestDecideLoad:
    def test_near_bottom_loads_next(self):
        metrics = ScrollMetrics(scroll_top=4500, client_height=800, scroll_height=5400)
        assert decide_load(metrics, 300, 50) is Direction.NEXT

    def test_near_top_loads_prev(self):
        metrics = ScrollMetrics(scroll_top=100, client_height=800, scroll_height=5400)
        assert decide_load(metrics, 300, 50) is Direction.PREV

    def test_middle_does_nothing(self):
        metrics = ScrollMetrics(scroll_top=2000, client_height=800, scroll_height=5400)
        assert decide_load(metrics, 300, 50) is None

    def test_empty_window_does_nothing(self):
        metrics = ScrollMetrics(scroll_top=0, client_height=800, scroll_height=800)
        assert decide_load(metrics, 300, 0) is None

    def test_short_content_prefers_next(self):
        metrics = ScrollMetrics(scroll_top=0, client_height=800, scroll_height=600)
        assert decide_load(metrics, 300, 5) is Direction.NEXT
