"""Local validation and upload of resumes that start a match job."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol

from jobwindow.application.services.match_session import MatchSession
from jobwindow.config import ACCEPTED_RESUME_EXTENSIONS, MAX_UPLOAD_MB
from jobwindow.errors import UploadValidationError

LOGGER = logging.getLogger(__name__)


class ResumeUploadTarget(Protocol):
    async def upload_resume(self, path: Path) -> str: ...


def validate_resume(
    path: Path,
    *,
    max_size_mb: int = MAX_UPLOAD_MB,
    accepted: Iterable[str] = ACCEPTED_RESUME_EXTENSIONS,
) -> Path:
    """Reject files the server would refuse, without touching the network."""

    path = Path(path)
    if not path.is_file():
        raise UploadValidationError(f"File not found: {path}")
    if path.stat().st_size > max_size_mb * 1024 * 1024:
        raise UploadValidationError(f"File must be under {max_size_mb} MB")
    allowed = tuple(ext.lower() for ext in accepted)
    if path.suffix.lower().lstrip(".") not in allowed:
        names = [ext.upper() for ext in allowed]
        label = names[0] if len(names) == 1 else f"{', '.join(names[:-1])}, or {names[-1]}"
        raise UploadValidationError(f"Please upload a {label} file")
    return path


class ResumeUploader:
    def __init__(self, target: ResumeUploadTarget, session: MatchSession) -> None:
        self._target = target
        self._session = session

    async def upload_and_match(self, path: Path) -> str:
        """Validate, upload and mark the returned job as in flight."""
        resume = validate_resume(path)
        LOGGER.info("Uploading resume %s", resume.name)
        job_id = await self._target.upload_resume(resume)
        self._session.begin_job(job_id)
        return job_id
