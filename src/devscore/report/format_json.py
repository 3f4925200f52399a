from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from devscore.analyze.metrics import StaticMetrics
from devscore.analyze.scoring import SCORE_WIRE_KEYS, QualitativeScores
from devscore.evaluate.models import NEUTRAL_SCORE, EvaluationResult, Feedback

from .models import SCHEMA_VERSION, EvaluationReport, ReportStats, SubmissionReport


def write_json(report: EvaluationReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str_list(value: Any) -> list[str]:
    return [str(v) for v in value] if isinstance(value, list) else []


def _scores_from(raw: Any) -> QualitativeScores:
    raw = raw if isinstance(raw, dict) else {}
    return QualitativeScores(
        **{attr: _float(raw.get(wire), float(NEUTRAL_SCORE)) for attr, wire in SCORE_WIRE_KEYS.items()}
    )


def _feedback_from(raw: Any) -> Feedback:
    raw = raw if isinstance(raw, dict) else {}
    return Feedback(
        strengths=_str_list(raw.get("strengths")),
        weaknesses=_str_list(raw.get("weaknesses")),
        suggestions=_str_list(raw.get("suggestions")),
        interview_questions=_str_list(raw.get("interviewQuestions")),
        detailed_analysis=str(raw.get("detailedAnalysis", "")),
    )


def _submission_from(raw: dict[str, Any]) -> SubmissionReport:
    family = raw.get("family")
    result = EvaluationResult(
        language=str(raw.get("language", "")),
        family=str(family) if family is not None else None,
        interview_mode=bool(raw.get("interview_mode", False)),
        metrics=StaticMetrics.from_dict(raw.get("static_analysis")),
        scores=_scores_from(raw.get("scores")),
        feedback=_feedback_from(raw.get("feedback")),
        static_penalty=_int(raw.get("static_penalty", 0)),
        dev_score=_int(raw.get("dev_score", 0)),
        fallback=bool(raw.get("fallback", False)),
    )
    return SubmissionReport(
        label=str(raw.get("label", "")),
        submitted_at=str(raw.get("submitted_at", "")),
        result=result,
    )


def _stats_from(raw: Any) -> ReportStats | None:
    if not isinstance(raw, dict):
        return None
    weakest = raw.get("weakest_skill")
    breakdown = raw.get("score_breakdown", {})
    trend = raw.get("recent_trend", [])
    return ReportStats(
        total_submissions=_int(raw.get("total_submissions", 0)),
        average_dev_score=_int(raw.get("average_dev_score", 0)),
        latest_dev_score=_int(raw.get("latest_dev_score", 0)),
        improvement=_int(raw.get("improvement", 0)),
        weakest_skill=str(weakest) if weakest is not None else None,
        score_breakdown={str(k): _int(v) for k, v in breakdown.items()} if isinstance(breakdown, dict) else {},
        recent_trend=[dict(t) for t in trend if isinstance(t, dict)] if isinstance(trend, list) else [],
    )


def read_json(path: Path) -> EvaluationReport:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raw = {}
    raw_submissions = raw.get("submissions", [])
    if not isinstance(raw_submissions, list):
        raw_submissions = []
    submissions = [_submission_from(s) for s in raw_submissions if isinstance(s, dict)]
    return EvaluationReport(
        schema_version=_int(raw.get("schema_version", SCHEMA_VERSION), SCHEMA_VERSION),
        generated_at=str(raw.get("generated_at", "")),
        submissions=submissions,
        stats=_stats_from(raw.get("stats")),
    )
