from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from devscore.analyze.metrics import StaticMetrics
from devscore.evaluate.models import NEUTRAL_EVALUATION, Evaluation
from devscore.evaluate.parse import parse_evaluation_or_neutral

log = logging.getLogger(__name__)


class Evaluator(Protocol):
    def evaluate(
        self,
        code: str,
        language: str,
        interview_mode: bool,
        metrics: StaticMetrics,
    ) -> Evaluation: ...


class NeutralEvaluator:
    def evaluate(
        self,
        code: str,
        language: str,
        interview_mode: bool,
        metrics: StaticMetrics,
    ) -> Evaluation:
        return NEUTRAL_EVALUATION


class PayloadEvaluator:
    """Replays a fixed model response, e.g. one captured from an LLM run."""

    def __init__(self, payload: str) -> None:
        self.payload = payload

    def evaluate(
        self,
        code: str,
        language: str,
        interview_mode: bool,
        metrics: StaticMetrics,
    ) -> Evaluation:
        return parse_evaluation_or_neutral(self.payload)


class JsonFileEvaluator:
    def __init__(self, path: Path) -> None:
        self.path = path

    def evaluate(
        self,
        code: str,
        language: str,
        interview_mode: bool,
        metrics: StaticMetrics,
    ) -> Evaluation:
        try:
            payload = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            log.warning("Failed to read evaluation %s (%s); using neutral scores.", self.path, exc)
            return NEUTRAL_EVALUATION
        return parse_evaluation_or_neutral(payload)
