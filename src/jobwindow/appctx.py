"""Application-wide context: one object per signed-in session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .application.services.job_poller import JobPoller
from .application.services.match_session import MatchSession
from .application.services.resume_uploader import ResumeUploader
from .application.services.window import StartOffsetKeys, SynthesizedCursorKeys
from .application.services.window_controller import WindowController
from .config import DEFAULT_API_BASE_URL, REQUEST_TIMEOUT_SEC, WindowConfig
from .domain.models.core import JobListing, MatchResult
from .errors.handler import ErrorHandler
from .events.bus import EventBus
from .infrastructure.api.client import ApiClient
from .settings.manager import SettingsManager


def _create_settings_manager(path: Optional[Path] = None) -> SettingsManager:
    manager = SettingsManager(path)
    manager.load()
    return manager


def _listing_sort_key(job: JobListing) -> str:
    return job.created_at


@dataclass
class AppContext:
    """Container object shared across views.

    Each call to a ``*_window`` factory builds a fresh controller with its own
    page cache; only the :class:`MatchSession` is shared between views.
    """

    settings: SettingsManager = field(default_factory=_create_settings_manager)
    event_bus: EventBus = field(default_factory=EventBus)
    api: Optional[ApiClient] = None
    window_config: WindowConfig = field(init=False)
    session: MatchSession = field(init=False)
    error_handler: ErrorHandler = field(init=False)

    def __post_init__(self) -> None:
        self.window_config = WindowConfig.from_settings(self.settings)
        if self.api is None:
            self.api = ApiClient(
                self.settings.get("api.base_url", DEFAULT_API_BASE_URL),
                timeout=self.settings.get("api.timeout_sec", REQUEST_TIMEOUT_SEC),
            )
        self.session = MatchSession(self.event_bus)
        self.error_handler = ErrorHandler(logging.getLogger("jobwindow"), self.event_bus)

    # ------------------------------------------------------------------
    # Window factories
    # ------------------------------------------------------------------
    def jobs_window(self, domain: Optional[str] = None) -> WindowController[JobListing]:
        return WindowController(
            self.api.jobs.list_jobs_cursor,
            SynthesizedCursorKeys(_listing_sort_key),
            config=self.window_config,
            domain=domain,
            name="jobs",
        )

    def matches_window(self) -> WindowController[MatchResult]:
        return WindowController(
            self.api.matches.get_results_page,
            StartOffsetKeys(),
            config=self.window_config,
            initial_load_guard=lambda: self.session.job_in_progress,
            name="matches",
        )

    # ------------------------------------------------------------------
    # View models
    # ------------------------------------------------------------------
    def jobs_view_model(self, domain: Optional[str] = None):
        from .gui.viewmodels.windowed_list_viewmodel import WindowedListViewModel

        return WindowedListViewModel(self.jobs_window(domain), error_handler=self.error_handler)

    def match_view_model(self):
        from .gui.viewmodels.match_results_viewmodel import MatchResultsViewModel

        controller = self.matches_window()
        poller = JobPoller(
            self.session,
            self.api.matches,
            controller,
            poll_interval_ms=self.window_config.poll_interval_ms,
            event_bus=self.event_bus,
            error_handler=self.error_handler,
        )
        uploader = ResumeUploader(self.api.matches, self.session)
        return MatchResultsViewModel(
            controller, self.session, poller, uploader, error_handler=self.error_handler
        )

    def saved_jobs_view_model(self):
        from .gui.viewmodels.saved_jobs_viewmodel import SavedJobsViewModel

        return SavedJobsViewModel(self.api.saved_jobs, self.event_bus)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def sign_out(self) -> None:
        """Forget the in-flight match job and per-user totals."""
        self.session.clear()

    async def aclose(self) -> None:
        await self.api.aclose()
