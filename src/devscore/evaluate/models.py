from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from devscore.analyze.metrics import StaticMetrics
from devscore.analyze.scoring import QualitativeScores

NEUTRAL_SCORE = 50


@dataclass(frozen=True)
class Feedback:
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    interview_questions: list[str] = field(default_factory=list)
    detailed_analysis: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "suggestions": list(self.suggestions),
            "interviewQuestions": list(self.interview_questions),
            "detailedAnalysis": self.detailed_analysis,
        }


@dataclass(frozen=True)
class Evaluation:
    scores: QualitativeScores
    feedback: Feedback


NEUTRAL_EVALUATION = Evaluation(
    scores=QualitativeScores.uniform(NEUTRAL_SCORE),
    feedback=Feedback(
        strengths=["Code submitted successfully"],
        weaknesses=["Unable to complete full evaluation"],
        suggestions=["Please try again or contact support"],
        interview_questions=["What was your approach to solving this problem?"],
        detailed_analysis="Evaluation service encountered an issue. Please try submitting again.",
    ),
)


@dataclass(frozen=True)
class Submission:
    code: str
    language: str
    interview_mode: bool = False
    label: str = ""
    # When the code was last written (UTC, ISO 8601); empty when unknown.
    submitted_at: str = ""


@dataclass(frozen=True)
class EvaluationResult:
    language: str
    family: str | None
    interview_mode: bool
    metrics: StaticMetrics
    scores: QualitativeScores
    feedback: Feedback
    static_penalty: int
    dev_score: int
    fallback: bool = False
