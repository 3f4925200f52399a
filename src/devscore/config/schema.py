from __future__ import annotations

from dataclasses import dataclass, field

from devscore.util.languages import SUPPORTED_LANGUAGES


@dataclass(frozen=True)
class DevScoreConfig:
    include: list[str] = field(default_factory=lambda: ["."])
    exclude: list[str] = field(
        default_factory=lambda: [
            ".venv",
            "venv",
            ".tox",
            "build",
            "dist",
            "node_modules",
            "vendor",
            ".git",
        ]
    )
    languages: list[str] = field(default_factory=lambda: list(SUPPORTED_LANGUAGES))
    language_routes: dict[str, str] = field(default_factory=dict)
    interview_mode: bool = False
    max_files: int = 200
    parallel_workers: int = 0
    fail_under: int | None = None
