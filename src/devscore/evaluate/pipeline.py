from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

from devscore.analyze.dispatch import analyze
from devscore.analyze.metrics import StaticMetrics
from devscore.analyze.scoring import dev_score, static_penalty
from devscore.evaluate.evaluator import Evaluator
from devscore.evaluate.models import NEUTRAL_EVALUATION, Evaluation, EvaluationResult, Submission
from devscore.util.languages import family_for_language, normalize_language

log = logging.getLogger(__name__)


def _run_evaluator(
    evaluator: Evaluator,
    submission: Submission,
    metrics: StaticMetrics,
) -> tuple[Evaluation, bool]:
    try:
        evaluation = evaluator.evaluate(
            submission.code,
            submission.language,
            submission.interview_mode,
            metrics,
        )
    except Exception as exc:
        log.warning("Evaluator failed for %s (%s); using neutral scores.", submission.label or "submission", exc)
        return NEUTRAL_EVALUATION, True
    if not isinstance(evaluation, Evaluation):
        log.warning("Evaluator returned %s; using neutral scores.", type(evaluation).__name__)
        return NEUTRAL_EVALUATION, True
    return evaluation, evaluation is NEUTRAL_EVALUATION


def evaluate_submission(
    submission: Submission,
    evaluator: Evaluator,
    routes: Mapping[str, str] | None = None,
) -> EvaluationResult:
    metrics = analyze(submission.code, submission.language, routes)
    evaluation, fallback = _run_evaluator(evaluator, submission, metrics)
    penalty = static_penalty(metrics)
    return EvaluationResult(
        language=normalize_language(str(submission.language or "")),
        family=family_for_language(submission.language, routes),
        interview_mode=submission.interview_mode,
        metrics=metrics,
        scores=evaluation.scores,
        feedback=evaluation.feedback,
        static_penalty=penalty,
        dev_score=dev_score(evaluation.scores, penalty),
        fallback=fallback,
    )


def evaluate_many(
    submissions: Sequence[Submission],
    evaluator: Evaluator,
    workers: int = 0,
    routes: Mapping[str, str] | None = None,
) -> list[EvaluationResult]:
    if workers and workers > 1 and len(submissions) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda s: evaluate_submission(s, evaluator, routes), submissions))
    return [evaluate_submission(s, evaluator, routes) for s in submissions]
