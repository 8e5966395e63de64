"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_API_BASE_URL,
    ESTIMATED_ROW_HEIGHT_PX,
    PAGE_CACHE_MAX_PAGES,
    PAGE_SIZE,
    POLL_INTERVAL_MS,
    REQUEST_TIMEOUT_SEC,
    SCROLL_LOAD_THRESHOLD_PX,
    WINDOW_MAX_ITEMS,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "jobwindow/settings.schema.json",
    "type": "object",
    "required": ["schema", "api", "window"],
    "properties": {
        "schema": {"const": "jobwindow/settings@1"},
        "api": {
            "type": "object",
            "properties": {
                "base_url": {"type": "string", "minLength": 1},
                "timeout_sec": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": True,
        },
        "window": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1, "maximum": 500},
                "max_items": {"type": "integer", "minimum": 1},
                "cache_pages": {"type": "integer", "minimum": 1},
                "poll_interval_ms": {"type": "integer", "minimum": 0},
                "scroll_threshold_px": {"type": "integer", "minimum": 0},
                "row_height_px": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "jobwindow/settings@1",
    "api": {
        "base_url": DEFAULT_API_BASE_URL,
        "timeout_sec": REQUEST_TIMEOUT_SEC,
    },
    "window": {
        "page_size": PAGE_SIZE,
        "max_items": WINDOW_MAX_ITEMS,
        "cache_pages": PAGE_CACHE_MAX_PAGES,
        "poll_interval_ms": POLL_INTERVAL_MS,
        "scroll_threshold_px": SCROLL_LOAD_THRESHOLD_PX,
        "row_height_px": ESTIMATED_ROW_HEIGHT_PX,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_SECTIONS = ("api", "window")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    if merged["window"]["max_items"] < merged["window"]["page_size"]:
        raise ValueError("window.max_items must be at least window.page_size")
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
