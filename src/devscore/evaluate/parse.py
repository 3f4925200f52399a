"""Turn free-form evaluator output into a typed :class:`Evaluation`.

Model output often arrives wrapped in Markdown code fences or with
missing pieces. Repair stops at fence stripping: anything that still does
not decode to ``{"scores": {...}, "feedback": {...}}`` is rejected and the
caller substitutes the neutral default.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from devscore.analyze.scoring import SCORE_MAX, SCORE_MIN, SCORE_WIRE_KEYS, QualitativeScores
from devscore.evaluate.models import NEUTRAL_EVALUATION, Evaluation, Feedback
from devscore.util.math import clamp

log = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    value = text.strip()
    if value.startswith("```"):
        value = _FENCE_RE.sub("", value)
    return value.strip()


def _score_value(raw: dict[str, Any], attr: str, wire: str) -> float | None:
    value = raw.get(wire, raw.get(attr))
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return clamp(value, SCORE_MIN, SCORE_MAX)


def _parse_scores(raw: Any) -> QualitativeScores | None:
    if not isinstance(raw, dict):
        return None
    values: dict[str, float] = {}
    for attr, wire in SCORE_WIRE_KEYS.items():
        value = _score_value(raw, attr, wire)
        if value is None:
            return None
        values[attr] = value
    return QualitativeScores(**values)


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(item) for item in raw if item is not None]


def _parse_feedback(raw: Any) -> Feedback | None:
    if not isinstance(raw, dict):
        return None
    detailed = raw.get("detailedAnalysis", raw.get("detailed_analysis", ""))
    return Feedback(
        strengths=_str_list(raw.get("strengths")),
        weaknesses=_str_list(raw.get("weaknesses")),
        suggestions=_str_list(raw.get("suggestions")),
        interview_questions=_str_list(raw.get("interviewQuestions", raw.get("interview_questions"))),
        detailed_analysis=str(detailed) if detailed is not None else "",
    )


def evaluation_from_dict(raw: Any) -> Evaluation | None:
    if not isinstance(raw, dict):
        return None
    scores = _parse_scores(raw.get("scores"))
    feedback = _parse_feedback(raw.get("feedback"))
    if scores is None or feedback is None:
        return None
    return Evaluation(scores=scores, feedback=feedback)


def parse_evaluation(text: str | None) -> Evaluation | None:
    if not text:
        return None
    try:
        raw = json.loads(strip_code_fences(text))
    except ValueError:
        return None
    return evaluation_from_dict(raw)


def parse_evaluation_or_neutral(text: str | None) -> Evaluation:
    evaluation = parse_evaluation(text)
    if evaluation is None:
        log.warning("Evaluator payload is malformed; using neutral scores.")
        return NEUTRAL_EVALUATION
    return evaluation
