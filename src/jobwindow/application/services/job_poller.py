"""Polling state machine for background resume-matching jobs.

``Idle -> InFlight(job_id) -> Completed | Failed -> Idle``.  While in flight
the job status is polled on a fixed interval.  Completion asks the window
controller to reload from scratch; failure surfaces the job's message.  Each
job id sees exactly one terminal transition and no polls after it.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Optional, Protocol

from jobwindow.application.services.cancellation import CancellationToken
from jobwindow.application.services.match_session import MatchSession
from jobwindow.application.services.window_controller import SKIP_STALE, WindowController
from jobwindow.config import POLL_INTERVAL_MS
from jobwindow.domain.models.core import JobStatus, JobStatusReport
from jobwindow.errors import ApiError, TransportError
from jobwindow.errors.handler import GENERIC_FALLBACK_MESSAGE, ErrorHandler
from jobwindow.events.bus import EventBus
from jobwindow.events.job_events import MatchJobFinishedEvent
from jobwindow.events.signal import ObservableProperty, Signal

LOGGER = logging.getLogger(__name__)

JOB_FAILED_MESSAGE = "Matching failed."
STATUS_CHECK_FAILED_MESSAGE = "Failed to check status."


class PollState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


class JobStatusSource(Protocol):
    async def get_match_job_status(self, job_id: str) -> JobStatusReport: ...


class JobPoller:
    """Follow ``session.current_job_id`` and drive it to a terminal state."""

    def __init__(
        self,
        session: MatchSession,
        status_source: JobStatusSource,
        controller: WindowController[Any],
        *,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._session = session
        self._error_handler = error_handler
        self._status_source = status_source
        self._controller = controller
        self._interval = poll_interval_ms / 1000.0
        self._event_bus = event_bus

        self._job_id: Optional[str] = None
        self._token: Optional[CancellationToken] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._attached = False

        self.state = ObservableProperty(PollState.IDLE)
        self.error = ObservableProperty(None)
        self.finished = Signal()  # emits (job_id, PollState)

    # -- properties --------------------------------------------------------

    @property
    def job_id(self) -> Optional[str]:
        return self._job_id

    @property
    def task(self) -> Optional[asyncio.Task[None]]:
        return self._task

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        """Attach to the session; resumes polling for a job already in flight.

        Must be called from within a running event loop.
        """
        if self._attached:
            return
        self._attached = True
        self._session.current_job_id.changed.connect(self._on_job_id_changed)
        job_id = self._session.current_job_id.value
        if job_id is not None:
            self._begin(job_id)

    def stop(self) -> None:
        """Detach on view teardown; in-flight responses are ignored."""
        if self._attached:
            self._session.current_job_id.changed.disconnect(self._on_job_id_changed)
            self._attached = False
        self._cancel_current()
        self.state.value = PollState.IDLE

    async def wait(self) -> None:
        """Wait for the current poll loop, if any, to finish."""
        task = self._task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    # -- internal ----------------------------------------------------------

    def _on_job_id_changed(self, new_job_id: Optional[str], _old: Optional[str]) -> None:
        if new_job_id == self._job_id:
            return
        self._cancel_current()
        if new_job_id is None:
            self.state.value = PollState.IDLE
        else:
            self._begin(new_job_id)

    def _begin(self, job_id: str) -> None:
        token = CancellationToken()
        self._job_id = job_id
        self._token = token
        self.error.value = None
        self.state.value = PollState.IN_FLIGHT
        LOGGER.info("Polling match job %s", job_id)
        self._task = asyncio.get_running_loop().create_task(self._poll(job_id, token))

    def _cancel_current(self) -> None:
        token, task = self._token, self._task
        self._token = None
        self._task = None
        self._job_id = None
        if token is not None:
            token.cancel()
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _poll(self, job_id: str, token: CancellationToken) -> None:
        while token.alive:
            try:
                report = await self._status_source.get_match_job_status(job_id)
            except ApiError as exc:
                if token.alive:
                    self._finish(job_id, token, PollState.FAILED, exc.message or STATUS_CHECK_FAILED_MESSAGE)
                return
            except TransportError as exc:
                if token.alive:
                    LOGGER.warning("Status poll for %s failed: %s", job_id, exc)
                    self._finish(job_id, token, PollState.FAILED, STATUS_CHECK_FAILED_MESSAGE)
                return
            except Exception as exc:
                if token.alive:
                    self._fail_unexpectedly(job_id, token, exc)
                return
            if not token.alive:
                return

            if report.status is JobStatus.COMPLETED:
                await self._complete(job_id, token)
                return
            if report.status is JobStatus.FAILED:
                self._finish(job_id, token, PollState.FAILED, report.error or JOB_FAILED_MESSAGE)
                return

            LOGGER.debug("Match job %s is %s", job_id, report.status.value)
            await asyncio.sleep(self._interval)

    async def _complete(self, job_id: str, token: CancellationToken) -> None:
        try:
            outcome = await self._controller.reload()
            # A reset during the reload discards it; the window still needs the new results.
            while outcome.skipped_reason == SKIP_STALE and token.alive:
                outcome = await self._controller.reload()
        except ApiError as exc:
            if token.alive:
                self._finish(job_id, token, PollState.FAILED, exc.message or STATUS_CHECK_FAILED_MESSAGE)
            return
        except TransportError as exc:
            if token.alive:
                LOGGER.warning("Reloading results for %s failed: %s", job_id, exc)
                self._finish(job_id, token, PollState.FAILED, STATUS_CHECK_FAILED_MESSAGE)
            return
        except Exception as exc:
            if token.alive:
                self._fail_unexpectedly(job_id, token, exc)
            return
        if token.alive:
            self._session.total_matches.value = self._controller.state.total_count
            self._finish(job_id, token, PollState.COMPLETED, None)

    def _fail_unexpectedly(self, job_id: str, token: CancellationToken, exc: Exception) -> None:
        LOGGER.error("Match job %s: unexpected failure: %s", job_id, exc, exc_info=exc)
        self._finish(job_id, token, PollState.FAILED, GENERIC_FALLBACK_MESSAGE)
        if self._error_handler is not None:
            self._error_handler.handle_unexpected(exc, {"job_id": job_id})

    def _finish(
        self,
        job_id: str,
        token: CancellationToken,
        outcome: PollState,
        message: Optional[str],
    ) -> None:
        if not token.cancel():
            return
        LOGGER.info("Match job %s finished: %s", job_id, outcome.value)
        self.error.value = message
        self.state.value = outcome
        self.finished.emit(job_id, outcome)
        if self._event_bus is not None:
            self._event_bus.publish(
                MatchJobFinishedEvent(job_id=job_id, status=outcome.value, error=message, source="poller")
            )
        self._task = None
        self._token = None
        self._job_id = None
        self._session.end_job(job_id)
        self.state.value = PollState.IDLE
