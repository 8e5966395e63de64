from .core import (
    Direction,
    JobListing,
    JobStatus,
    JobStatusReport,
    MatchExplanation,
    MatchResult,
    Page,
    ScoreBreakdown,
)
from .query import PageQuery

__all__ = [
    "Direction",
    "JobListing",
    "JobStatus",
    "JobStatusReport",
    "MatchExplanation",
    "MatchResult",
    "Page",
    "PageQuery",
    "ScoreBreakdown",
]
