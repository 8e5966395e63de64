from .bus import Event, EventBus, Subscription
from .domain_events import DomainEvent, JobEvent
from .job_events import (
    MatchJobFinishedEvent,
    MatchJobStartedEvent,
    SavedJobsChangedEvent,
    SessionClearedEvent,
)

__all__ = [
    "DomainEvent",
    "Event",
    "EventBus",
    "JobEvent",
    "MatchJobFinishedEvent",
    "MatchJobStartedEvent",
    "SavedJobsChangedEvent",
    "SessionClearedEvent",
    "Subscription",
]
