"""Default configuration values for jobwindow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .settings.manager import SettingsManager

# ---------------------------------------------------------------------------
# Paging and window sizing
# ---------------------------------------------------------------------------

PAGE_SIZE: Final[int] = 50
WINDOW_MAX_ITEMS: Final[int] = 500
PAGE_CACHE_MAX_PAGES: Final[int] = 20

# Key under which the first page of a fresh window is remembered.
INITIAL_CACHE_KEY: Final[str] = "initial"

# ---------------------------------------------------------------------------
# Background match job polling
# ---------------------------------------------------------------------------

POLL_INTERVAL_MS: Final[int] = 1500
REQUEST_TIMEOUT_SEC: Final[float] = 30.0

# ---------------------------------------------------------------------------
# Scroll and grid layout
# ---------------------------------------------------------------------------

SCROLL_LOAD_THRESHOLD_PX: Final[int] = 300
ESTIMATED_ROW_HEIGHT_PX: Final[int] = 280
COLUMNS_DEFAULT: Final[int] = 3
COLUMNS_WITH_PANEL: Final[int] = 2

# ---------------------------------------------------------------------------
# Resume uploads
# ---------------------------------------------------------------------------

MAX_UPLOAD_MB: Final[int] = 10
ACCEPTED_RESUME_EXTENSIONS: Final[tuple[str, ...]] = ("pdf", "docx", "txt")

DEFAULT_API_BASE_URL: Final[str] = "http://localhost:8000"


@dataclass(frozen=True)
class WindowConfig:
    """Tunables shared by every windowed list and the job poller."""

    page_size: int = PAGE_SIZE
    window_max_items: int = WINDOW_MAX_ITEMS
    cache_capacity_pages: int = PAGE_CACHE_MAX_PAGES
    poll_interval_ms: int = POLL_INTERVAL_MS
    scroll_load_threshold_px: int = SCROLL_LOAD_THRESHOLD_PX
    estimated_row_height_px: int = ESTIMATED_ROW_HEIGHT_PX

    def __post_init__(self) -> None:
        for name in (
            "page_size",
            "window_max_items",
            "cache_capacity_pages",
            "estimated_row_height_px",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.poll_interval_ms < 0:
            raise ValueError("poll_interval_ms must be >= 0")
        if self.scroll_load_threshold_px < 0:
            raise ValueError("scroll_load_threshold_px must be >= 0")
        if self.window_max_items < self.page_size:
            raise ValueError("window_max_items must be at least one page")

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds, as expected by ``asyncio.sleep``."""
        return self.poll_interval_ms / 1000.0

    @classmethod
    def from_settings(cls, settings: "SettingsManager") -> "WindowConfig":
        return cls(
            page_size=settings.get("window.page_size", PAGE_SIZE),
            window_max_items=settings.get("window.max_items", WINDOW_MAX_ITEMS),
            cache_capacity_pages=settings.get("window.cache_pages", PAGE_CACHE_MAX_PAGES),
            poll_interval_ms=settings.get("window.poll_interval_ms", POLL_INTERVAL_MS),
            scroll_load_threshold_px=settings.get(
                "window.scroll_threshold_px", SCROLL_LOAD_THRESHOLD_PX
            ),
            estimated_row_height_px=settings.get(
                "window.row_height_px", ESTIMATED_ROW_HEIGHT_PX
            ),
        )
