from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

LANGUAGE_ALIASES = {
    "py": "python",
    "python": "python",
    "python3": "python",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "node": "javascript",
    "javascript": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "typescript": "typescript",
    "cpp": "cpp",
    "c++": "cpp",
    "cxx": "cpp",
    "cc": "cpp",
    "java": "java",
}

LANGUAGE_EXTENSIONS = {
    "python": [".py"],
    "javascript": [".js", ".jsx", ".mjs"],
    "typescript": [".ts", ".tsx"],
    "cpp": [".cpp", ".cc", ".cxx", ".hpp", ".h"],
    "java": [".java"],
}

# Lexical rule sets. Java has no rule set of its own and must be routed.
FAMILIES = ("js", "python", "cpp")

LANGUAGE_FAMILIES = {
    "javascript": "js",
    "typescript": "js",
    "python": "python",
    "cpp": "cpp",
}

SUPPORTED_LANGUAGES = sorted(LANGUAGE_EXTENSIONS.keys())


def normalize_language(name: str) -> str:
    key = name.strip().lower()
    return LANGUAGE_ALIASES.get(key, key)


def normalize_languages(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        lang = normalize_language(str(value))
        if not lang:
            continue
        if lang in seen:
            continue
        seen.add(lang)
        out.append(lang)
    return out


def family_for_language(name: str | None, routes: Mapping[str, str] | None = None) -> str | None:
    if not name:
        return None
    lang = normalize_language(str(name))
    if routes:
        for key, family in routes.items():
            if normalize_language(str(key)) == lang:
                value = str(family).strip().lower()
                if value in FAMILIES:
                    return value
                return LANGUAGE_FAMILIES.get(normalize_language(value))
    return LANGUAGE_FAMILIES.get(lang)


def extensions_for_languages(values: Iterable[str]) -> set[str]:
    languages = normalize_languages(values)
    exts: set[str] = set()
    for lang in languages:
        exts.update(LANGUAGE_EXTENSIONS.get(lang, []))
    return exts


def language_for_path(path: Path) -> str | None:
    suffix = path.suffix.lower()
    for lang, extensions in LANGUAGE_EXTENSIONS.items():
        if suffix in extensions:
            return lang
    return None
