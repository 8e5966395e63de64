"""Table model exposing a windowed list as a grid of cards to Qt views."""

from __future__ import annotations

import logging
from typing import Any, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QPersistentModelIndex, Qt

from ...viewmodels.grid_layout import GridLayout
from ...viewmodels.saved_jobs_viewmodel import SavedJobsViewModel
from ...viewmodels.windowed_list_viewmodel import WindowedListViewModel
from .roles import Roles, role_names

logger = logging.getLogger(__name__)


class WindowGridModel(QAbstractTableModel):
    """Rows of ``columns`` cells over the view model's current window.

    Cells past the last item report ``IS_PLACEHOLDER`` so delegates can paint
    an empty slot.  Changing the column count only re-lays out the grid.
    """

    def __init__(
        self,
        view_model: WindowedListViewModel,
        saved_jobs: Optional[SavedJobsViewModel] = None,
        parent=None,
    ) -> None:  # type: ignore[override]
        super().__init__(parent)
        self._view_model = view_model
        self._saved_jobs = saved_jobs
        self._items: list[Any] = list(view_model.items.value)
        self._columns: int = view_model.columns.value

        view_model.items.changed.connect(self._on_items_changed)
        view_model.columns.changed.connect(self._on_columns_changed)
        if saved_jobs is not None:
            saved_jobs.saved_ids.changed.connect(self._on_saved_ids_changed)

    def detach(self) -> None:
        """Stop observing the view model."""
        self._view_model.items.changed.disconnect(self._on_items_changed)
        self._view_model.columns.changed.disconnect(self._on_columns_changed)
        if self._saved_jobs is not None:
            self._saved_jobs.saved_ids.changed.disconnect(self._on_saved_ids_changed)

    # ------------------------------------------------------------------
    # QAbstractItemModel overrides
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex | QPersistentModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return GridLayout(self._columns).row_count(len(self._items))

    def columnCount(self, parent: QModelIndex | QPersistentModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return self._columns

    def data(self, index: QModelIndex | QPersistentModelIndex, role: int = Qt.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid():
            return None
        item = self.item_at(index.row(), index.column())
        if role == Roles.IS_PLACEHOLDER:
            return item is None
        if item is None:
            return None
        if role == Qt.DisplayRole:
            return getattr(item, "title", str(item.id))
        if role == Qt.ToolTipRole:
            job = getattr(item, "job", item)
            return f"{job.title} · {job.company_name}" if job.company_name else job.title
        if role == Roles.ITEM:
            return item
        if role == Roles.ITEM_ID:
            return item.id
        if role == Roles.IS_SAVED:
            return self._saved_jobs is not None and self._saved_jobs.is_saved(item.id)
        if role == Roles.IS_SELECTED:
            selected = self._view_model.selected_item.value
            return selected is not None and selected.id == item.id
        return None

    def flags(self, index: QModelIndex | QPersistentModelIndex) -> Qt.ItemFlag:  # type: ignore[override]
        if not index.isValid() or self.item_at(index.row(), index.column()) is None:
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    def roleNames(self) -> dict[int, bytes]:  # type: ignore[override]
        return role_names(super().roleNames())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def item_at(self, row: int, column: int) -> Optional[Any]:
        return GridLayout(self._columns).item_at(self._items, row, column)

    def index_for_item(self, item_id: str) -> QModelIndex:
        for position, item in enumerate(self._items):
            if item.id == item_id:
                row, column = divmod(position, self._columns)
                return self.index(row, column)
        return QModelIndex()

    # ------------------------------------------------------------------
    # View model observers
    # ------------------------------------------------------------------
    def _on_items_changed(self, items: list[Any], _old: list[Any]) -> None:
        self.beginResetModel()
        self._items = list(items)
        self.endResetModel()
        logger.debug("Grid model reset with %d items", len(self._items))

    def _on_columns_changed(self, columns: int, _old: int) -> None:
        # Row and column counts both change, so persistent indexes cannot be remapped.
        self.beginResetModel()
        self._columns = columns
        self.endResetModel()

    def _on_saved_ids_changed(self, _saved: frozenset, _old: frozenset) -> None:
        rows = self.rowCount()
        if rows == 0:
            return
        self.dataChanged.emit(
            self.index(0, 0),
            self.index(rows - 1, self._columns - 1),
            [int(Roles.IS_SAVED)],
        )
