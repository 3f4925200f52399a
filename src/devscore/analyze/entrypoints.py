from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

import pathspec

from devscore.config.schema import DevScoreConfig
from devscore.util.languages import extensions_for_languages

IGNORE_FILENAME = ".devscoreignore"

_GLOB_CHARS = set("*?[")


def _has_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in _GLOB_CHARS)


def _is_supported_file(p: Path, extensions: set[str]) -> bool:
    return p.is_file() and p.suffix.lower() in extensions


def _normalize_pattern(pattern: str) -> str:
    p = pattern.strip()
    if not p or p.startswith("#"):
        return ""
    p = p.replace("\\", "/")
    if p.startswith("./"):
        p = p[2:]
    if p.startswith("/"):
        p = p.lstrip("/")
    if p in {".", ""}:
        return "**"
    if p.endswith("/"):
        return f"{p}**"
    if not _has_glob(p) and Path(p).suffix == "":
        return f"{p}/**"
    return p


def _path_spec(patterns: Iterable[str]) -> pathspec.GitIgnoreSpec:
    lines = [norm for norm in (_normalize_pattern(str(p)) for p in patterns) if norm]
    return pathspec.GitIgnoreSpec.from_lines(lines)


def _load_ignore_spec(repo_root: Path) -> pathspec.GitIgnoreSpec | None:
    ignore_path = repo_root / IGNORE_FILENAME
    if not ignore_path.exists():
        return None
    try:
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def build_included_predicate(repo_root: Path, cfg: DevScoreConfig) -> Callable[[Path], bool]:
    include_spec = _path_spec(cfg.include or ["."])
    exclude_spec = _path_spec(cfg.exclude)
    ignore_spec = _load_ignore_spec(repo_root)

    def included(p: Path) -> bool:
        try:
            rel = p.resolve().relative_to(repo_root.resolve())
        except ValueError:
            return False
        rel_posix = PurePosixPath(rel.as_posix()).as_posix()
        if not include_spec.match_file(rel_posix):
            return False
        if exclude_spec.match_file(rel_posix):
            return False
        if ignore_spec is not None and ignore_spec.match_file(rel_posix):
            return False
        return True

    return included


def discover_files(repo_root: Path, cfg: DevScoreConfig, targets: Iterable[Path] | None = None) -> list[Path]:
    """Expand target files and directories into analyzable source files.

    Explicit file targets are always kept; directory contents are filtered
    by language extension, include/exclude and ``.devscoreignore``.
    """
    extensions = extensions_for_languages(cfg.languages)
    included = build_included_predicate(repo_root, cfg)
    roots = list(targets) if targets else [repo_root]
    seen: set[Path] = set()
    files: list[Path] = []
    for root in roots:
        if root.is_dir():
            candidates = sorted(p for ext in extensions for p in root.rglob(f"*{ext}"))
            candidates = [p for p in candidates if _is_supported_file(p, extensions) and included(p)]
        elif root.is_file():
            candidates = [root]
        else:
            continue
        for p in candidates:
            rp = p.resolve()
            if rp in seen:
                continue
            seen.add(rp)
            files.append(p)
            if len(files) >= cfg.max_files:
                return files
    return files
