from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar


class Direction(str, Enum):
    NEXT = "next"
    PREV = "prev"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass
class JobListing:
    id: str
    title: str = ""
    company_name: str = ""
    description: str = ""
    source: str = ""
    domain: str = ""
    subdomain: str = ""
    years_experience_min: int = 0
    years_experience_max: int = 0
    skills_required: List[str] = field(default_factory=list)
    location: str = ""
    remote: str = ""
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    # Server timestamps are kept as the raw ISO strings; they double as the
    # sort key of synthesized backward cursors.
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> JobListing:
        known = cls.__dataclass_fields__
        values = {key: value for key, value in payload.items() if key in known}
        values["id"] = str(payload["id"])
        if values.get("skills_required") is None:
            values["skills_required"] = []
        return cls(**values)


@dataclass
class ScoreBreakdown:
    skills: float = 0.0
    semantic: float = 0.0
    yoe: float = 0.0


@dataclass
class MatchExplanation:
    matched_skills: List[str] = field(default_factory=list)
    missing_required: List[str] = field(default_factory=list)
    summary: str = ""


@dataclass
class MatchResult:
    job: JobListing
    score: float = 0.0
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    explanation: MatchExplanation = field(default_factory=MatchExplanation)

    @property
    def id(self) -> str:
        return self.job.id

    @property
    def title(self) -> str:
        return self.job.title

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> MatchResult:
        breakdown = payload.get("breakdown") or {}
        explanation = payload.get("explanation") or {}
        return cls(
            job=JobListing.from_payload(payload["job"]),
            score=float(payload.get("score", 0.0)),
            breakdown=ScoreBreakdown(
                skills=float(breakdown.get("skills", 0.0)),
                semantic=float(breakdown.get("semantic", 0.0)),
                yoe=float(breakdown.get("yoe", 0.0)),
            ),
            explanation=MatchExplanation(
                matched_skills=list(explanation.get("matched_skills") or []),
                missing_required=list(explanation.get("missing_required") or []),
                summary=explanation.get("summary") or "",
            ),
        )


T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One batch of items returned by a single cursor request."""

    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None
    prev_cursor: Optional[str] = None
    total_count: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass
class JobStatusReport:
    job_id: str
    status: JobStatus
    error: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> JobStatusReport:
        return cls(
            job_id=str(payload["job_id"]),
            status=JobStatus(payload["status"]),
            error=payload.get("error"),
        )
