from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from files2prompt.config import ENV_FIELDS

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory, without files2prompt variables nor piped stdin."""
    for name in ENV_FIELDS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    return workdir


@pytest.fixture
def test_project(tmp_path: Path) -> Path:
    """Small project tree with a hidden file, a .gitignore and an ignored folder."""
    root = tmp_path / "test_project"
    (root / "src").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "temp").mkdir()
    (root / ".hidden.go").write_text("hidden code", encoding="utf-8")
    (root / ".gitignore").write_text("# build output\n*.log\n\ntemp/\n", encoding="utf-8")
    (root / "debug.log").write_text("log line", encoding="utf-8")
    (root / "src" / "main.go").write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    (root / "docs" / "README.txt").write_text("Hello world", encoding="utf-8")
    (root / "temp" / "file.txt").write_text("temp file", encoding="utf-8")
    return root
