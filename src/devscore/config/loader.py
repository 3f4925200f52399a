from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from .schema import DevScoreConfig

log = logging.getLogger(__name__)

CONFIG_FILENAME = ".devscore.yml"


def _load_raw_config(path: Path) -> dict[str, Any]:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("Failed to load %s (%s). Skipping.", path, e)
        return {}


def _get_list(raw: dict[str, Any], key: str) -> list[str] | None:
    if key not in raw:
        return None
    v = raw.get(key)
    if isinstance(v, list):
        return [str(x) for x in v]
    log.warning("Config key %s must be a list; ignoring.", key)
    return None


def _get_optional_int(raw: dict[str, Any], key: str) -> int | None:
    if key not in raw:
        return None
    v = raw.get(key)
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        log.warning("Config key %s must be an integer; ignoring.", key)
        return None


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    if key not in raw:
        return default
    v = raw.get(key)
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        if v.strip().lower() in {"true", "yes", "1", "on"}:
            return True
        if v.strip().lower() in {"false", "no", "0", "off"}:
            return False
    return default


def _get_routes(raw: dict[str, Any]) -> dict[str, str] | None:
    if "language_routes" not in raw:
        return None
    v = raw.get("language_routes")
    if not isinstance(v, dict):
        log.warning("Config key language_routes must be a mapping; ignoring.")
        return None
    out: dict[str, str] = {}
    for key, family in v.items():
        if key is None or family is None:
            continue
        out[str(key).strip().lower()] = str(family).strip().lower()
    return out


def _merge_config(
    base: DevScoreConfig,
    raw: dict[str, Any],
    include_set: bool,
    exclude_set: bool,
) -> tuple[DevScoreConfig, bool, bool]:
    include = base.include
    exclude = base.exclude

    raw_include = _get_list(raw, "include")
    if raw_include is not None:
        if include_set:
            include = [*include, *raw_include]
        else:
            include = raw_include
            include_set = True

    raw_exclude = _get_list(raw, "exclude")
    if raw_exclude is not None:
        if exclude_set:
            exclude = [*exclude, *raw_exclude]
        else:
            exclude = raw_exclude
            exclude_set = True

    languages = base.languages
    raw_languages = _get_list(raw, "languages")
    if raw_languages is not None:
        languages = raw_languages

    language_routes = base.language_routes
    raw_routes = _get_routes(raw)
    if raw_routes is not None:
        language_routes = {**language_routes, **raw_routes}

    interview_mode = _get_bool(raw, "interview_mode", base.interview_mode)
    max_files = _get_optional_int(raw, "max_files")
    if max_files is None:
        max_files = base.max_files
    parallel_workers = _get_optional_int(raw, "parallel_workers")
    if parallel_workers is None:
        parallel_workers = base.parallel_workers
    fail_under = _get_optional_int(raw, "fail_under")
    if fail_under is None:
        fail_under = base.fail_under

    return (
        DevScoreConfig(
            include=include,
            exclude=exclude,
            languages=languages,
            language_routes=language_routes,
            interview_mode=interview_mode,
            max_files=max_files,
            parallel_workers=parallel_workers,
            fail_under=fail_under,
        ),
        include_set,
        exclude_set,
    )


def resolve_config_paths(repo_root: Path, config_paths: Iterable[Path] | None) -> list[Path]:
    if config_paths is None:
        return [repo_root / CONFIG_FILENAME]
    resolved: list[Path] = []
    for path in config_paths:
        p = Path(path)
        if not p.is_absolute():
            p = repo_root / p
        resolved.append(p)
    return resolved


def load_config(repo_root: Path, config_paths: Iterable[Path] | None = None) -> DevScoreConfig:
    paths = resolve_config_paths(repo_root, config_paths)
    if config_paths is None and not paths[0].exists():
        return DevScoreConfig()

    cfg = DevScoreConfig()
    include_set = False
    exclude_set = False
    for path in paths:
        if not path.exists():
            log.warning("Config %s not found; skipping.", path)
            continue
        raw = _load_raw_config(path)
        if not isinstance(raw, dict):
            log.warning("Config %s is not a mapping; skipping.", path)
            continue
        cfg, include_set, exclude_set = _merge_config(cfg, raw, include_set, exclude_set)
    return cfg
