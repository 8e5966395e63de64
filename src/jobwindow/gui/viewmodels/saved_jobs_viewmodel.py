"""Saved/unsaved side channel shared by the job grids."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from jobwindow.domain.models.core import JobListing
from jobwindow.errors import ApiError, TransportError
from jobwindow.events.bus import EventBus
from jobwindow.events.job_events import SavedJobsChangedEvent, SessionClearedEvent
from jobwindow.events.signal import ObservableProperty, Signal
from jobwindow.gui.viewmodels.base import BaseViewModel


class SavedJobsStore(Protocol):
    async def add(self, job_id: str) -> None: ...

    async def remove(self, job_id: str) -> None: ...

    async def list(self) -> List[JobListing]: ...


class SavedJobsViewModel(BaseViewModel):
    """Track which job ids the user saved and toggle them.

    Other views learn about changes through ``SavedJobsChangedEvent`` and
    refresh their copy; the windows themselves are never touched.
    """

    def __init__(self, store: SavedJobsStore, event_bus: EventBus) -> None:
        super().__init__()
        self._store = store
        self._event_bus = event_bus
        self._logger = logging.getLogger(__name__)
        self._source = f"saved-jobs-{id(self)}"

        self.jobs = ObservableProperty([])
        self.saved_ids = ObservableProperty(frozenset())
        self.loading = ObservableProperty(False)
        self.error = ObservableProperty(None)
        self.stale = ObservableProperty(False)

        self.saved_toggled = Signal()  # emits (job_id, saved)

        self.subscribe_event(event_bus, SavedJobsChangedEvent, self._on_saved_jobs_changed)
        self.subscribe_event(event_bus, SessionClearedEvent, self._on_session_cleared)

    def is_saved(self, job_id: str) -> bool:
        return job_id in self.saved_ids.value

    async def refresh(self) -> None:
        self.loading.value = True
        try:
            jobs = await self._store.list()
        except (ApiError, TransportError) as exc:
            self._logger.warning("Failed to load saved jobs: %s", exc)
            self.error.value = str(exc) or "Failed to load saved jobs."
            return
        finally:
            self.loading.value = False
        self.error.value = None
        self.stale.value = False
        self.jobs.value = jobs
        self.saved_ids.value = frozenset(job.id for job in jobs)

    async def toggle(self, job_id: str) -> Optional[bool]:
        """Save or unsave *job_id*; returns the new state, ``None`` on failure."""
        saved = self.is_saved(job_id)
        try:
            if saved:
                await self._store.remove(job_id)
            else:
                await self._store.add(job_id)
        except (ApiError, TransportError) as exc:
            self._logger.warning("Failed to toggle saved job %s: %s", job_id, exc)
            self.error.value = str(exc) or "Failed to update saved jobs."
            return None
        await self.refresh()
        self.saved_toggled.emit(job_id, not saved)
        self._event_bus.publish(
            SavedJobsChangedEvent(job_id=job_id, saved=not saved, source=self._source)
        )
        return not saved

    # -- EventBus handlers --------------------------------------------------

    def _on_saved_jobs_changed(self, event: SavedJobsChangedEvent) -> None:
        if event.published_by(self._source):
            return
        self.stale.value = True
        try:
            self.track_task(self.refresh())
        except RuntimeError:
            self._logger.debug("No running loop; saved jobs marked stale")

    def _on_session_cleared(self, _event: SessionClearedEvent) -> None:
        self.jobs.value = []
        self.saved_ids.value = frozenset()
