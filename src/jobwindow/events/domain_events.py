"""Immutable events about match jobs and saved listings."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base for everything published on the :class:`EventBus`.

    ``source`` names the publisher ("session", "poller" or a per-instance
    view model tag) so a subscriber can drop events it published itself.
    """

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""

    def published_by(self, source: str) -> bool:
        return bool(source) and self.source == source


@dataclass(frozen=True)
class JobEvent(DomainEvent):
    """An event about a single match job or job listing."""

    job_id: str = ""
