from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from pathlib import Path

from devscore.analyze.cpp import analyze_source as analyze_cpp
from devscore.analyze.js_ts import analyze_source as analyze_js_ts
from devscore.analyze.metrics import StaticMetrics
from devscore.analyze.python import analyze_source as analyze_python
from devscore.util.languages import family_for_language, language_for_path, normalize_language

log = logging.getLogger(__name__)

Analyzer = Callable[[str], StaticMetrics]

ANALYZERS: dict[str, Analyzer] = {
    "js": analyze_js_ts,
    "python": analyze_python,
    "cpp": analyze_cpp,
}

_WARNED: set[str] = set()
_WARNED_LIMIT = 256
_WARNED_LOCK = threading.Lock()


def _as_text(code: object) -> str:
    if code is None:
        return ""
    if isinstance(code, str):
        return code
    if isinstance(code, (bytes, bytearray)):
        return bytes(code).decode("utf-8", errors="replace")
    return str(code)


def _warn_unrouted(language: str) -> None:
    with _WARNED_LOCK:
        if language in _WARNED:
            return
        if len(_WARNED) >= _WARNED_LIMIT:
            _WARNED.clear()
        _WARNED.add(language)
    log.warning(
        "No analyzer for language %r; static metrics default to zero. Route it via language_routes.",
        language,
    )


def analyze(
    code: str | bytes | None,
    language: str | None,
    routes: Mapping[str, str] | None = None,
) -> StaticMetrics:
    family = family_for_language(language, routes)
    analyzer = ANALYZERS.get(family) if family else None
    if analyzer is None:
        _warn_unrouted(normalize_language(str(language or "")) or "<none>")
        return StaticMetrics.zero()
    return analyzer(_as_text(code))


def analyze_file(
    path: Path,
    language: str | None = None,
    routes: Mapping[str, str] | None = None,
) -> StaticMetrics:
    lang = language or language_for_path(path)
    try:
        src = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        log.warning("Failed to read %s (%s); using zero metrics.", path, exc)
        return StaticMetrics.zero()
    return analyze(src, lang, routes)
