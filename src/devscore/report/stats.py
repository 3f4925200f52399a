from __future__ import annotations

from collections.abc import Iterable

from devscore.analyze.scoring import SCORE_WIRE_KEYS
from devscore.util.math import mean, round_half_up

from .models import ReportStats, SubmissionReport

IMPROVEMENT_WINDOW = 3
TREND_LENGTH = 10


def empty_stats() -> ReportStats:
    return ReportStats(
        total_submissions=0,
        average_dev_score=0,
        latest_dev_score=0,
        improvement=0,
        weakest_skill=None,
        score_breakdown={},
        recent_trend=[],
    )


def _improvement(newest_first: list[SubmissionReport]) -> int:
    # Mean of the newest window against the window before it.
    if len(newest_first) < IMPROVEMENT_WINDOW * 2:
        return 0
    recent = [s.result.dev_score for s in newest_first[:IMPROVEMENT_WINDOW]]
    previous = [s.result.dev_score for s in newest_first[IMPROVEMENT_WINDOW : IMPROVEMENT_WINDOW * 2]]
    return round_half_up(mean(recent) - mean(previous))


def _score_breakdown(submissions: list[SubmissionReport]) -> dict[str, int]:
    out: dict[str, int] = {}
    for attr, wire in SCORE_WIRE_KEYS.items():
        out[wire] = round_half_up(mean([float(getattr(s.result.scores, attr)) for s in submissions]))
    return out


def _weakest_skill(breakdown: dict[str, int]) -> str | None:
    weakest: str | None = None
    for skill, value in breakdown.items():
        # Ties move to the later dimension.
        if weakest is None or value <= breakdown[weakest]:
            weakest = skill
    return weakest


def submission_stats(submissions: Iterable[SubmissionReport]) -> ReportStats:
    newest_first = sorted(submissions, key=lambda s: s.submitted_at, reverse=True)
    if not newest_first:
        return empty_stats()
    breakdown = _score_breakdown(newest_first)
    trend = [
        {
            "submitted_at": s.submitted_at,
            "dev_score": s.result.dev_score,
            "language": s.result.language,
        }
        for s in reversed(newest_first[:TREND_LENGTH])
    ]
    return ReportStats(
        total_submissions=len(newest_first),
        average_dev_score=round_half_up(mean([float(s.result.dev_score) for s in newest_first])),
        latest_dev_score=newest_first[0].result.dev_score,
        improvement=_improvement(newest_first),
        weakest_skill=_weakest_skill(breakdown),
        score_breakdown=breakdown,
        recent_trend=trend,
    )
