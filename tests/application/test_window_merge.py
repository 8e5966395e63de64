"""Tests for the pure window merge functions and backward-key strategies."""

from dataclasses import dataclass

from jobwindow.application.services.window import (
    StartOffsetKeys,
    SynthesizedCursorKeys,
    WindowState,
    append_and_trim,
    prepend_and_trim,
    unique_head,
)


@dataclass
class Item:
    id: str
    created_at: str = ""


def _items(start: int, stop: int) -> list:
    return [Item(id=str(index), created_at=f"t{index:04d}") for index in range(start, stop)]


def _ids(items) -> list:
    return [item.id for item in items]


# ---------------------------------------------------------------------------
# append_and_trim
# ---------------------------------------------------------------------------


class TestAppendAndTrim:
    def test_appends_below_limit(self):
        result = append_and_trim(_items(0, 3), _items(3, 5), 10)
        assert _ids(result.items) == ["0", "1", "2", "3", "4"]
        assert result.added == 2
        assert result.dropped == 0

    def test_drops_oldest_prefix(self):
        result = append_and_trim(_items(0, 500), _items(500, 550), 500)
        assert len(result.items) == 500
        assert result.items[0].id == "50"
        assert result.items[-1].id == "549"
        assert result.dropped == 50

    def test_skips_ids_already_held(self):
        result = append_and_trim(_items(0, 3), _items(2, 5), 10)
        assert _ids(result.items) == ["0", "1", "2", "3", "4"]
        assert result.added == 2

    def test_skips_duplicates_within_page(self):
        incoming = _items(3, 4) + _items(3, 4)
        result = append_and_trim(_items(0, 3), incoming, 10)
        assert _ids(result.items) == ["0", "1", "2", "3"]

    def test_does_not_mutate_input(self):
        existing = _items(0, 3)
        append_and_trim(existing, _items(3, 6), 4)
        assert _ids(existing) == ["0", "1", "2"]


# ---------------------------------------------------------------------------
# prepend_and_trim
# ---------------------------------------------------------------------------


class TestPrependAndTrim:
    def test_prepends_below_limit(self):
        result = prepend_and_trim(_items(3, 5), _items(0, 3), 10)
        assert _ids(result.items) == ["0", "1", "2", "3", "4"]
        assert result.added == 3

    def test_drops_newest_suffix(self):
        result = prepend_and_trim(_items(50, 550), _items(0, 50), 500)
        assert len(result.items) == 500
        assert result.items[0].id == "0"
        assert result.items[-1].id == "499"
        assert result.dropped == 50

    def test_overlap_adds_nothing(self):
        result = prepend_and_trim(_items(0, 5), _items(0, 3), 10)
        assert result.added == 0
        assert _ids(result.items) == ["0", "1", "2", "3", "4"]


def test_unique_head_caps_and_dedups():
    incoming = _items(0, 3) + _items(1, 2) + _items(3, 6)
    assert _ids(unique_head(incoming, 4)) == ["0", "1", "2", "3"]


# ---------------------------------------------------------------------------
# Backward key strategies
# ---------------------------------------------------------------------------


class TestSynthesizedCursorKeys:
    def test_backward_key_uses_first_item(self):
        keys = SynthesizedCursorKeys(lambda item: item.created_at)
        state = WindowState(items=_items(7, 9))
        assert keys.backward_key(state) == "t0007,7"

    def test_empty_window_has_no_key(self):
        keys = SynthesizedCursorKeys(lambda item: item.created_at)
        assert keys.backward_key(WindowState()) is None

    def test_forward_cursor_after_trim_uses_last_item(self):
        keys = SynthesizedCursorKeys(lambda item: item.created_at)
        state = WindowState(items=_items(0, 4))
        assert keys.forward_cursor_after_tail_trim(state) == "t0003,3"
        assert keys.start_reached(state) is False


class TestStartOffsetKeys:
    def test_key_is_offset(self):
        keys = StartOffsetKeys()
        assert keys.backward_key(WindowState(items=_items(0, 2), start_offset=100)) == "100"

    def test_no_key_at_start(self):
        keys = StartOffsetKeys()
        state = WindowState(items=_items(0, 2), start_offset=0)
        assert keys.backward_key(state) is None
        assert keys.start_reached(state) is True

    def test_forward_cursor_after_trim(self):
        keys = StartOffsetKeys()
        state = WindowState(items=_items(0, 500), start_offset=50)
        assert keys.forward_cursor_after_tail_trim(state) == "550"
