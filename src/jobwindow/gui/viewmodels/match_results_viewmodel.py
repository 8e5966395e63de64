"""ViewModel for the resume-match results grid.

Adds the in-flight match job to the windowed list: uploads start a job, the
poller follows it, and the grid reloads from scratch once it completes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jobwindow.application.services.job_poller import JobPoller
from jobwindow.application.services.match_session import MatchSession
from jobwindow.application.services.resume_uploader import ResumeUploader, validate_resume
from jobwindow.application.services.window_controller import LoadOutcome, WindowController
from jobwindow.errors import ApiError, TransportError, UploadValidationError
from jobwindow.errors.handler import ErrorHandler
from jobwindow.events.signal import ObservableProperty
from jobwindow.gui.viewmodels.windowed_list_viewmodel import WindowedListViewModel

UPLOAD_FAILED_MESSAGE = "Upload failed"


class MatchResultsViewModel(WindowedListViewModel):
    def __init__(
        self,
        controller: WindowController[Any],
        session: MatchSession,
        poller: JobPoller,
        uploader: ResumeUploader,
        *,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__(controller, error_handler=error_handler)
        self._session = session
        self._poller = poller
        self._uploader = uploader

        self.job_in_progress = ObservableProperty(session.job_in_progress)
        self.total_matches = ObservableProperty(session.total_matches.value)
        self.uploading = ObservableProperty(False)
        self.job_error = ObservableProperty(None)
        self.initial_load_done = ObservableProperty(False)

        self._session.current_job_id.changed.connect(self._on_job_id_changed)
        self._session.total_matches.changed.connect(self._on_total_matches_changed)
        self._poller.error.changed.connect(self._on_poll_error)

    @property
    def poller(self) -> JobPoller:
        return self._poller

    def activate(self) -> None:
        """Start following the session's match job; call on mount."""
        self._poller.start()

    async def load_initial(self) -> LoadOutcome:
        outcome = await super().load_initial()
        if outcome.not_found:
            self._session.total_matches.value = None
        elif outcome.applied:
            self._session.total_matches.value = self._controller.state.total_count
        if outcome.applied or outcome.not_found or outcome.error is not None:
            self.initial_load_done.value = True
        return outcome

    async def upload_and_match(self, path: Path) -> Optional[str]:
        """Upload *path* and start a match job; returns the job id on success."""
        self.job_error.value = None
        try:
            validate_resume(path)
        except UploadValidationError as exc:
            self.job_error.value = str(exc)
            return None

        self.uploading.value = True
        try:
            return await self._uploader.upload_and_match(path)
        except UploadValidationError as exc:
            self.job_error.value = str(exc)
        except ApiError as exc:
            self.job_error.value = exc.message or UPLOAD_FAILED_MESSAGE
        except TransportError:
            self.job_error.value = UPLOAD_FAILED_MESSAGE
        finally:
            self.uploading.value = False
        return None

    def dispose(self) -> None:
        self._poller.stop()
        self._session.current_job_id.changed.disconnect(self._on_job_id_changed)
        self._session.total_matches.changed.disconnect(self._on_total_matches_changed)
        self._poller.error.changed.disconnect(self._on_poll_error)
        super().dispose()

    # -- internal ----------------------------------------------------------

    def _on_job_id_changed(self, job_id: Optional[str], _old: Optional[str]) -> None:
        self.job_in_progress.value = job_id is not None
        if job_id is not None:
            self.job_error.value = None

    def _on_total_matches_changed(self, total: Optional[int], _old: Optional[int]) -> None:
        self.total_matches.value = total

    def _on_poll_error(self, message: Optional[str], _old: Optional[str]) -> None:
        if message:
            self.job_error.value = message
            self.error_occurred.emit(message)
