from dataclasses import dataclass
from typing import Optional

from .domain_events import DomainEvent, JobEvent


@dataclass(frozen=True)
class MatchJobStartedEvent(JobEvent):
    pass


@dataclass(frozen=True)
class MatchJobFinishedEvent(JobEvent):
    status: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class SavedJobsChangedEvent(JobEvent):
    saved: bool = False


@dataclass(frozen=True)
class SessionClearedEvent(DomainEvent):
    pass
