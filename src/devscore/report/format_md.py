from __future__ import annotations

from devscore.analyze.metrics import WIRE_KEYS
from devscore.analyze.scoring import SCORE_WIRE_KEYS, applied_penalty

from .models import EvaluationReport, SubmissionReport


def _metrics_cell(sub: SubmissionReport) -> str:
    metrics = sub.result.metrics
    parts = [f"{wire}={getattr(metrics, attr)}" for attr, wire in WIRE_KEYS.items() if getattr(metrics, attr)]
    return ", ".join(parts) if parts else "clean"


def _fmt_score(value: float) -> str:
    return f"{value:g}"


def to_markdown(report: EvaluationReport, max_items: int = 3) -> str:
    lines: list[str] = []
    lines.append("# DevScore report")
    lines.append("")
    lines.append(f"- Generated: `{report.generated_at}`")
    lines.append(f"- Schema: `v{report.schema_version}`")
    lines.append(f"- Submissions: `{len(report.submissions)}`")
    if report.stats and report.stats.total_submissions:
        lines.append(f"- Average DevScore: `{report.stats.average_dev_score}`")
        if report.stats.weakest_skill:
            lines.append(f"- Weakest skill: `{report.stats.weakest_skill}`")
    lines.append("")

    if not report.submissions:
        lines.append("_No submissions evaluated._")
        return "\n".join(lines) + "\n"

    lines.append("| DevScore | Penalty | Language | Submission | Static issues |")
    lines.append("|---:|---:|---|---|---|")
    for sub in report.submissions:
        r = sub.result
        penalty = f"{r.static_penalty} (-{applied_penalty(r.static_penalty)})"
        language = r.language if r.family else f"{r.language} (no analyzer)"
        label = sub.label or "submission"
        if r.fallback:
            label = f"{label} (neutral scores)"
        lines.append(f"| {r.dev_score} | {penalty} | {language} | `{label}` | {_metrics_cell(sub)} |")
    lines.append("")

    for sub in report.submissions:
        r = sub.result
        lines.append(f"## {sub.label or 'submission'}")
        lines.append("")
        scores = ", ".join(f"{wire} {_fmt_score(getattr(r.scores, attr))}" for attr, wire in SCORE_WIRE_KEYS.items())
        lines.append(f"Scores: {scores}")
        lines.append("")
        sections = (
            ("Strengths", r.feedback.strengths),
            ("Weaknesses", r.feedback.weaknesses),
            ("Suggestions", r.feedback.suggestions),
            ("Interview questions" if r.interview_mode else "Follow-up questions", r.feedback.interview_questions),
        )
        for title, items in sections:
            if not items:
                continue
            lines.append(f"**{title}**")
            lines.append("")
            for item in items[:max_items]:
                lines.append(f"- {item}")
            lines.append("")
    return "\n".join(lines)
