"""Role definitions shared by the window grid models."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to QML or widgets."""

    ITEM = Qt.UserRole + 1
    ITEM_ID = Qt.UserRole + 2
    IS_PLACEHOLDER = Qt.UserRole + 3
    IS_SAVED = Qt.UserRole + 4
    IS_SELECTED = Qt.UserRole + 5


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.ITEM: b"item",
            Roles.ITEM_ID: b"itemId",
            Roles.IS_PLACEHOLDER: b"isPlaceholder",
            Roles.IS_SAVED: b"isSaved",
            Roles.IS_SELECTED: b"isSelected",
        }
    )
    return mapping
