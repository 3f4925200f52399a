from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import yaml

from devscore import __version__
from devscore.analyze.dispatch import analyze
from devscore.analyze.entrypoints import discover_files
from devscore.analyze.scoring import applied_penalty, static_penalty
from devscore.config.loader import CONFIG_FILENAME, load_config, resolve_config_paths
from devscore.config.schema import DevScoreConfig
from devscore.config.templates import CONFIG_PRESETS
from devscore.config.validate import validate_config_paths
from devscore.evaluate.evaluator import Evaluator, JsonFileEvaluator, NeutralEvaluator, PayloadEvaluator
from devscore.evaluate.models import Submission
from devscore.evaluate.pipeline import evaluate_many
from devscore.evaluate.prompt import build_evaluation_prompt
from devscore.report.format_json import read_json, write_json
from devscore.report.format_md import to_markdown
from devscore.report.models import SCHEMA_VERSION, EvaluationReport, SubmissionReport
from devscore.report.stats import submission_stats
from devscore.util.languages import family_for_language, language_for_path, normalize_language
from devscore.util.logging import setup_logging

log = logging.getLogger(__name__)

STDIN_TARGET = "-"
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _utc_mtime(path: Path) -> str:
    return datetime.fromtimestamp(path.stat().st_mtime, timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _relative_path(repo_root: Path, path: Path) -> str:
    try:
        return path.resolve().relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _resolve_root(args: argparse.Namespace) -> Path:
    if args.root:
        return Path(args.root).resolve()
    dirs = [Path(t) for t in args.targets if t != STDIN_TARGET and Path(t).is_dir()]
    if len(dirs) == 1:
        return dirs[0].resolve()
    return Path(".").resolve()


def _load_cfg(args: argparse.Namespace, repo_root: Path) -> DevScoreConfig:
    config_paths = [Path(p) for p in args.config] if args.config else None
    return load_config(repo_root, config_paths)


def _collect_submissions(
    args: argparse.Namespace,
    cfg: DevScoreConfig,
    repo_root: Path,
    interview_mode: bool,
) -> list[Submission] | None:
    submissions: list[Submission] = []
    targets = [Path(t) for t in args.targets if t != STDIN_TARGET]
    if STDIN_TARGET in args.targets:
        if not args.language:
            log.error("Reading code from stdin requires --language.")
            return None
        submissions.append(
            Submission(code=sys.stdin.read(), language=args.language, interview_mode=interview_mode, label="<stdin>")
        )
    missing = [t for t in targets if not t.exists()]
    for t in missing:
        log.error("Path %s not found.", t)
    if missing:
        return None
    if targets:
        for fp in discover_files(repo_root, cfg, targets):
            language = args.language or language_for_path(fp) or ""
            try:
                code = fp.read_text(encoding="utf-8", errors="replace")
                submitted_at = _utc_mtime(fp)
            except OSError as exc:
                log.warning("Failed to read %s (%s); skipping.", fp, exc)
                continue
            submissions.append(
                Submission(
                    code=code,
                    language=language,
                    interview_mode=interview_mode,
                    label=_relative_path(repo_root, fp),
                    submitted_at=submitted_at,
                )
            )
    if not submissions:
        log.warning("No source files selected.")
    return submissions


def _write_outputs(args: argparse.Namespace, report: EvaluationReport) -> None:
    if args.json_path:
        write_json(report, Path(args.json_path))
        log.info("Wrote JSON report to %s", args.json_path)
    if args.md_path:
        md_path = Path(args.md_path)
        md_path.parent.mkdir(parents=True, exist_ok=True)
        md_path.write_text(to_markdown(report), encoding="utf-8")
        log.info("Wrote Markdown report to %s", args.md_path)


def cmd_analyze(args: argparse.Namespace) -> int:
    repo_root = _resolve_root(args)
    cfg = _load_cfg(args, repo_root)
    submissions = _collect_submissions(args, cfg, repo_root, interview_mode=False)
    if submissions is None:
        return 1
    out = []
    for sub in submissions:
        metrics = analyze(sub.code, sub.language, cfg.language_routes)
        penalty = static_penalty(metrics)
        out.append(
            {
                "label": sub.label,
                "language": normalize_language(sub.language),
                "family": family_for_language(sub.language, cfg.language_routes),
                "static_analysis": metrics.to_dict(),
                "static_penalty": penalty,
                "applied_penalty": applied_penalty(penalty),
            }
        )
    text = json.dumps(out, indent=2)
    if args.json_path:
        path = Path(args.json_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        log.info("Wrote static analysis to %s", args.json_path)
    else:
        print(text)
    return 0


def cmd_prompt(args: argparse.Namespace) -> int:
    repo_root = _resolve_root(args)
    cfg = _load_cfg(args, repo_root)
    interview_mode = bool(args.interview or cfg.interview_mode)
    submissions = _collect_submissions(args, cfg, repo_root, interview_mode=interview_mode)
    if submissions is None:
        return 1
    out = []
    for sub in submissions:
        metrics = analyze(sub.code, sub.language, cfg.language_routes)
        language = normalize_language(sub.language) or sub.language
        out.append(
            {
                "label": sub.label,
                "language": language,
                "interview_mode": interview_mode,
                "static_analysis": metrics.to_dict(),
                "prompt": build_evaluation_prompt(sub.code, language, interview_mode, metrics),
            }
        )
    if args.json_path:
        path = Path(args.json_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(out, indent=2), encoding="utf-8")
        log.info("Wrote evaluation prompts to %s", args.json_path)
    else:
        print("\n\n---\n\n".join(item["prompt"] for item in out))
    return 0


def _build_evaluator(args: argparse.Namespace) -> Evaluator:
    if args.evaluation == STDIN_TARGET:
        return PayloadEvaluator(sys.stdin.read())
    if args.evaluation:
        return JsonFileEvaluator(Path(args.evaluation))
    log.info("No evaluation payload given; scoring with neutral qualitative scores.")
    return NeutralEvaluator()


def cmd_score(args: argparse.Namespace) -> int:
    repo_root = _resolve_root(args)
    cfg = _load_cfg(args, repo_root)
    interview_mode = bool(args.interview or cfg.interview_mode)
    if args.evaluation == STDIN_TARGET and STDIN_TARGET in args.targets:
        log.error("Only one of the code and --evaluation can be read from stdin.")
        return 1
    submissions = _collect_submissions(args, cfg, repo_root, interview_mode=interview_mode)
    if submissions is None:
        return 1
    workers = args.workers if args.workers is not None else cfg.parallel_workers
    results = evaluate_many(submissions, _build_evaluator(args), workers=workers, routes=cfg.language_routes)

    generated_at = _utc_now()
    entries = [
        SubmissionReport(label=sub.label, submitted_at=sub.submitted_at or generated_at, result=result)
        for sub, result in zip(submissions, results)
    ]
    report = EvaluationReport(
        schema_version=SCHEMA_VERSION,
        generated_at=generated_at,
        submissions=entries,
        stats=submission_stats(entries),
    )
    _write_outputs(args, report)
    if not args.md_path:
        print(to_markdown(report))

    fail_under = args.fail_under if args.fail_under is not None else cfg.fail_under
    if fail_under is None:
        return 0
    failing = [e for e in entries if e.result.dev_score < fail_under]
    for e in failing:
        log.error("Gating failed: %s scored %d (< %d)", e.label or "submission", e.result.dev_score, fail_under)
    return 1 if failing else 0


def cmd_stats(args: argparse.Namespace) -> int:
    entries: list[SubmissionReport] = []
    for p in args.reports:
        path = Path(p)
        try:
            report = read_json(path)
        except (OSError, ValueError) as exc:
            log.error("Failed to load report %s (%s).", path, exc)
            return 1
        entries.extend(report.submissions)
    print(json.dumps(submission_stats(entries).to_dict(), indent=2))
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    repo_root = Path(args.path).resolve()
    target = Path(args.output) if args.output else repo_root / CONFIG_FILENAME
    if not target.is_absolute():
        target = repo_root / target
    preset = str(args.preset or "full").lower()
    template = CONFIG_PRESETS.get(preset, CONFIG_PRESETS["full"])
    if target.exists() and not args.force:
        log.error("Config %s already exists. Use --force to overwrite.", target)
        return 1
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(template, encoding="utf-8")
    log.info("Wrote config to %s", target)
    return 0


def cmd_config_show(args: argparse.Namespace) -> int:
    repo_root = Path(args.path).resolve()
    config_paths = [Path(p) for p in args.config] if args.config else None
    cfg = load_config(repo_root, config_paths)
    text = yaml.safe_dump(dataclasses.asdict(cfg), sort_keys=False)
    if args.output:
        out_path = Path(args.output)
        if not out_path.is_absolute():
            out_path = repo_root / out_path
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
    else:
        print(text)
    return 0


def cmd_config_validate(args: argparse.Namespace) -> int:
    repo_root = Path(args.path).resolve()
    config_paths = resolve_config_paths(repo_root, [Path(p) for p in args.config] if args.config else None)
    if not args.config and not config_paths[0].exists():
        log.error("Config %s not found.", config_paths[0])
        return 1
    errors = validate_config_paths(config_paths)
    if errors:
        for err in errors:
            log.error("%s", err)
        return 1
    log.info("Config valid.")
    return 0


def _add_target_args(a: argparse.ArgumentParser) -> None:
    a.add_argument("targets", nargs="+", help="Source files or directories ('-' reads stdin)")
    a.add_argument("--language", default=None, help="Language of the code (default: from file extension)")
    a.add_argument("--root", default=None, help="Repo root for config and relative paths")
    a.add_argument(
        "--config",
        action="append",
        default=None,
        help="Config file path (repeatable, repo-relative or absolute)",
    )
    a.add_argument("--json", dest="json_path", default=None, help="Write JSON output to path")


def _add_config_arg(a: argparse.ArgumentParser) -> None:
    a.add_argument("path", nargs="?", default=".", help="Repo root (default: .)")
    a.add_argument(
        "--config",
        action="append",
        default=None,
        help="Config file path (repeatable, repo-relative or absolute)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="devscore", description="DevScore: static analysis and code scoring")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    sub = p.add_subparsers(dest="cmd", required=True)

    a = sub.add_parser("analyze", help="Print static metrics for source files")
    _add_target_args(a)
    a.set_defaults(func=cmd_analyze)

    s = sub.add_parser("score", help="Compute DevScores for source files")
    _add_target_args(s)
    s.add_argument(
        "--evaluation",
        default=None,
        help="Evaluator payload JSON, '-' reads stdin (default: neutral scores)",
    )
    s.add_argument("--interview", action="store_true", help="Score in interview mode")
    s.add_argument("--md", dest="md_path", default=None, help="Write Markdown report to path")
    s.add_argument("--fail-under", type=int, default=None, help="Exit 1 when any DevScore is below this value")
    s.add_argument("--workers", type=int, default=None, help="Parallel workers (default: config)")
    s.set_defaults(func=cmd_score)

    pr = sub.add_parser("prompt", help="Print evaluator prompts with static metrics")
    _add_target_args(pr)
    pr.add_argument("--interview", action="store_true", help="Build interview-mode prompts")
    pr.set_defaults(func=cmd_prompt)

    st = sub.add_parser("stats", help="Summarise DevScores across JSON reports")
    st.add_argument("reports", nargs="+", help="Report JSON files written by 'devscore score --json'")
    st.set_defaults(func=cmd_stats)

    c = sub.add_parser("config", help="Config utilities")
    c_sub = c.add_subparsers(dest="config_cmd", required=True)
    c_show = c_sub.add_parser("show", help="Show merged config")
    _add_config_arg(c_show)
    c_show.add_argument("--output", default=None, help="Write output to path instead of stdout")
    c_show.set_defaults(func=cmd_config_show)

    c_validate = c_sub.add_parser("validate", help="Validate config file(s)")
    _add_config_arg(c_validate)
    c_validate.set_defaults(func=cmd_config_validate)

    i = sub.add_parser("init", help="Create a DevScore configuration file")
    i.add_argument("path", nargs="?", default=".", help="Repo root (default: .)")
    i.add_argument("--output", default=None, help=f"Output path (default: {CONFIG_FILENAME})")
    i.add_argument(
        "--preset",
        default="full",
        choices=sorted(CONFIG_PRESETS.keys()),
        help="Template preset (default: full)",
    )
    i.add_argument("--force", action="store_true", help="Overwrite existing config if present")
    i.set_defaults(func=cmd_init)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(bool(args.verbose))
    return int(args.func(args))
