from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from devscore.util.languages import (
    FAMILIES,
    LANGUAGE_FAMILIES,
    SUPPORTED_LANGUAGES,
    normalize_language,
    normalize_languages,
)

KNOWN_KEYS = {
    "include",
    "exclude",
    "languages",
    "language_routes",
    "interview_mode",
    "max_files",
    "parallel_workers",
    "fail_under",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_list_strings(raw: dict[str, Any], key: str, errors: list[str]) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{key} must be a list of strings")


def _validate_optional_int(raw: dict[str, Any], key: str, errors: list[str], minimum: int | None = None) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if value is None:
        return
    if not _is_int(value):
        errors.append(f"{key} must be an integer")
        return
    if minimum is not None and value < minimum:
        errors.append(f"{key} must be >= {minimum}")


def _validate_optional_bool(raw: dict[str, Any], key: str, errors: list[str]) -> None:
    if key not in raw:
        return
    value = raw.get(key)
    if value is None:
        return
    if not isinstance(value, bool):
        errors.append(f"{key} must be a boolean")


def _validate_languages(raw: dict[str, Any], errors: list[str]) -> None:
    if "languages" not in raw:
        return
    value = raw.get("languages")
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append("languages must be a list of strings")
        return
    unsupported = [lang for lang in normalize_languages(value) if lang not in SUPPORTED_LANGUAGES]
    if unsupported:
        errors.append(f"languages contains unsupported values: {', '.join(unsupported)}")


def _validate_routes(raw: dict[str, Any], errors: list[str]) -> None:
    if "language_routes" not in raw:
        return
    value = raw.get("language_routes")
    if value is None:
        return
    if not isinstance(value, dict):
        errors.append("language_routes must be a mapping of language to family")
        return
    for lang, family in value.items():
        if not isinstance(lang, str) or not isinstance(family, str):
            errors.append("language_routes keys and values must be strings")
            continue
        target = family.strip().lower()
        if target not in FAMILIES and normalize_language(target) not in LANGUAGE_FAMILIES:
            errors.append(
                f"language_routes.{lang} routes to unknown family {family!r} (expected one of: {', '.join(FAMILIES)})"
            )


def validate_raw_config(raw: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    for key in raw:
        if key not in KNOWN_KEYS:
            errors.append(f"Unknown key: {key}")
    _validate_list_strings(raw, "include", errors)
    _validate_list_strings(raw, "exclude", errors)
    _validate_languages(raw, errors)
    _validate_routes(raw, errors)
    _validate_optional_bool(raw, "interview_mode", errors)
    _validate_optional_int(raw, "max_files", errors, minimum=1)
    _validate_optional_int(raw, "parallel_workers", errors, minimum=0)
    _validate_optional_int(raw, "fail_under", errors, minimum=0)
    if _is_int(raw.get("fail_under")) and raw["fail_under"] > 100:
        errors.append("fail_under must be <= 100")
    return errors


def validate_config_paths(paths: Iterable[Path]) -> list[str]:
    errors: list[str] = []
    for path in paths:
        if not path.exists():
            errors.append(f"{path}: not found")
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            errors.append(f"{path}: failed to parse ({exc})")
            continue
        if not isinstance(raw, dict):
            errors.append(f"{path}: config must be a mapping")
            continue
        errors.extend(f"{path}: {err}" for err in validate_raw_config(raw))
    return errors
