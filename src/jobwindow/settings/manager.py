"""Persistent settings for the job browser: API endpoint, window sizing and polling.

Values are addressed with dotted keys such as ``window.page_size`` and are
validated against the JSON schema on every load and update.
"""

from __future__ import annotations

import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from ..errors import SettingsLoadError, SettingsValidationError
from ..events.signal import Signal
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults

SETTINGS_ENV_VAR = "JOBWINDOW_SETTINGS"
_MISSING = object()


def default_settings_path() -> Path:
    """Return the settings.json location, honouring ``JOBWINDOW_SETTINGS``."""

    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "jobwindow" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "jobwindow" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "jobwindow" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "jobwindow" / "settings.json"
    return Path.home() / ".config" / "jobwindow" / "settings.json"


class SettingsManager:
    """Load, validate and persist user settings.

    ``settings_changed(key, value)`` fires only when an update actually changes
    the stored value.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)
        self.settings_changed = Signal()  # emits (key, value)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing."""

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(str(exc)) from exc
            if not isinstance(payload, dict):
                raise SettingsLoadError(f"{path} does not contain a JSON object")
        else:
            payload = None
        try:
            self._data = merge_with_defaults(payload)
        except Exception as exc:
            raise SettingsValidationError(str(exc)) from exc
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value*, validate and persist the change."""

        if isinstance(value, Path):
            value = str(value)
        if self.get(key, _MISSING) == value:
            return

        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except Exception as exc:
            raise SettingsValidationError(str(exc)) from exc
        self._write()
        self.settings_changed.emit(key, value)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        write_json(self.path, self._data)


__all__ = ["SETTINGS_ENV_VAR", "SettingsManager", "default_settings_path"]
