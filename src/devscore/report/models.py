from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from devscore.analyze.scoring import applied_penalty, weighted_base
from devscore.evaluate.models import EvaluationResult

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class SubmissionReport:
    label: str
    submitted_at: str
    result: EvaluationResult

    def to_dict(self) -> dict[str, Any]:
        r = self.result
        return {
            "label": self.label,
            "submitted_at": self.submitted_at,
            "language": r.language,
            "family": r.family,
            "interview_mode": r.interview_mode,
            "static_analysis": r.metrics.to_dict(),
            "scores": r.scores.to_dict(),
            "feedback": r.feedback.to_dict(),
            "base_score": weighted_base(r.scores),
            "static_penalty": r.static_penalty,
            "applied_penalty": applied_penalty(r.static_penalty),
            "dev_score": r.dev_score,
            "fallback": r.fallback,
        }


@dataclass(frozen=True)
class ReportStats:
    total_submissions: int
    average_dev_score: int
    latest_dev_score: int
    improvement: int
    weakest_skill: str | None
    score_breakdown: dict[str, int]
    recent_trend: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EvaluationReport:
    schema_version: int
    generated_at: str
    submissions: list[SubmissionReport]
    stats: ReportStats | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "schema_version": self.schema_version,
            "generated_at": self.generated_at,
            "submissions": [s.to_dict() for s in self.submissions],
        }
        if self.stats is not None:
            data["stats"] = self.stats.to_dict()
        return data
