from __future__ import annotations

import subprocess
import sys
from pathlib import Path


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "devscore", *args],
        capture_output=True,
        text=True,
        check=False,
    )


def test_cli_init_writes_config(tmp_path: Path) -> None:
    result = _run("init", str(tmp_path), "--preset", "minimal")
    assert result.returncode == 0
    cfg = tmp_path / ".devscore.yml"
    assert cfg.exists()
    assert "include:" in cfg.read_text(encoding="utf-8")


def test_cli_init_refuses_to_overwrite(tmp_path: Path) -> None:
    cfg = tmp_path / ".devscore.yml"
    cfg.write_text("max_files: 3\n", encoding="utf-8")
    assert _run("init", str(tmp_path)).returncode == 1
    assert cfg.read_text(encoding="utf-8") == "max_files: 3\n"
    assert _run("init", str(tmp_path), "--force").returncode == 0
    assert "language_routes:" in cfg.read_text(encoding="utf-8")


def test_cli_config_validate_and_show(tmp_path: Path) -> None:
    assert _run("init", str(tmp_path)).returncode == 0
    assert _run("config", "validate", str(tmp_path)).returncode == 0

    shown = _run("config", "show", str(tmp_path))
    assert shown.returncode == 0
    assert "java: js" in shown.stdout

    (tmp_path / ".devscore.yml").write_text("max_file: 3\n", encoding="utf-8")
    invalid = _run("config", "validate", str(tmp_path))
    assert invalid.returncode == 1
    assert "Unknown key: max_file" in invalid.stderr
