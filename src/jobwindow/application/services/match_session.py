"""Session-scoped match job state shared by every view that needs it."""

from __future__ import annotations

import logging
from typing import Optional

from jobwindow.events.bus import EventBus
from jobwindow.events.job_events import MatchJobStartedEvent, SessionClearedEvent
from jobwindow.events.signal import ObservableProperty

LOGGER = logging.getLogger(__name__)


class MatchSession:
    """Holds the in-flight match job id for the signed-in user.

    The object outlives individual views, so a user who navigates away while a
    job runs sees the in-progress indicator again on return.  It is cleared on
    sign-out.
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._event_bus = event_bus
        self.current_job_id = ObservableProperty(None)
        self.total_matches = ObservableProperty(None)

    @property
    def job_in_progress(self) -> bool:
        return self.current_job_id.value is not None

    def begin_job(self, job_id: str) -> None:
        LOGGER.info("Match job %s accepted", job_id)
        self.current_job_id.value = job_id
        if self._event_bus is not None:
            self._event_bus.publish(MatchJobStartedEvent(job_id=job_id, source="session"))

    def end_job(self, job_id: str) -> None:
        """Clear the job id if *job_id* is still the current one."""
        if self.current_job_id.value == job_id:
            self.current_job_id.value = None

    def clear(self) -> None:
        self.current_job_id.value = None
        self.total_matches.value = None
        if self._event_bus is not None:
            self._event_bus.publish(SessionClearedEvent(source="session"))
