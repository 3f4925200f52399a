from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from devscore.analyze.metrics import StaticMetrics
from devscore.util.math import clamp, round_half_up

SCORE_MIN = 0
SCORE_MAX = 100
PENALTY_MULTIPLIER = 2
MAX_APPLIED_PENALTY = 10

# Weights in tenths so the base is exact for integer scores.
SCORE_WEIGHTS = {
    "code_quality": 3,
    "time_complexity": 2,
    "security": 2,
    "readability": 2,
    "space_complexity": 1,
}
_WEIGHT_DENOMINATOR = 10

if sum(SCORE_WEIGHTS.values()) != _WEIGHT_DENOMINATOR:  # pragma: no cover - guarded invariant
    raise RuntimeError("score weights must sum to 1.0")

SCORE_WIRE_KEYS = {
    "code_quality": "codeQuality",
    "time_complexity": "timeComplexity",
    "space_complexity": "spaceComplexity",
    "security": "security",
    "readability": "readability",
}


@dataclass(frozen=True)
class QualitativeScores:
    code_quality: float
    time_complexity: float
    space_complexity: float
    security: float
    readability: float

    @classmethod
    def uniform(cls, value: float) -> QualitativeScores:
        return cls(value, value, value, value, value)

    def to_dict(self) -> dict[str, Any]:
        return {wire: getattr(self, attr) for attr, wire in SCORE_WIRE_KEYS.items()}


# (predicate, points); every rule that holds contributes.
PENALTY_RULES = (
    (lambda m: m.nested_loops >= 3, 2),
    (lambda m: m.console_logs > 5, 1),
    (lambda m: m.long_functions > 0, 2),
    (lambda m: m.security_risks > 0, 3),
    (lambda m: m.poor_naming > 3, 1),
    (lambda m: m.missing_error_handling > 0, 1),
)

MAX_STATIC_PENALTY = sum(points for _rule, points in PENALTY_RULES)


def static_penalty(metrics: StaticMetrics) -> int:
    return sum(points for rule, points in PENALTY_RULES if rule(metrics))


def weighted_base(scores: QualitativeScores) -> float:
    total = sum(getattr(scores, attr) * weight for attr, weight in SCORE_WEIGHTS.items())
    return total / _WEIGHT_DENOMINATOR


def applied_penalty(penalty: int) -> int:
    return min(penalty * PENALTY_MULTIPLIER, MAX_APPLIED_PENALTY)


def dev_score(scores: QualitativeScores, penalty: int) -> int:
    value = weighted_base(scores) - applied_penalty(penalty)
    return int(clamp(round_half_up(value), SCORE_MIN, SCORE_MAX))


@dataclass(frozen=True)
class ScoreBreakdown:
    base: float
    static_penalty: int
    applied_penalty: int
    dev_score: int


def score_breakdown(scores: QualitativeScores, metrics: StaticMetrics) -> ScoreBreakdown:
    penalty = static_penalty(metrics)
    return ScoreBreakdown(
        base=weighted_base(scores),
        static_penalty=penalty,
        applied_penalty=applied_penalty(penalty),
        dev_score=dev_score(scores, penalty),
    )
