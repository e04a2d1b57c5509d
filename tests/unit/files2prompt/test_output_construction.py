from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest
from structlog.testing import capture_logs

from files2prompt.exceptions import NoPathsProvidedError, OutputFileError
from files2prompt.output_construction import open_sink, run, seed_rules
from files2prompt.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path

MAIN_GO = "package main\n\nfunc main() {}\n"


@pytest.mark.unit
def test_run_without_paths_fails_before_writing(tmp_path: Path) -> None:
    output = tmp_path / "out.txt"

    with pytest.raises(NoPathsProvidedError):
        run(Settings(output_file=str(output)))

    assert not output.exists()


@pytest.mark.unit
def test_run_claude_xml_wraps_documents_and_numbers_them(test_project: Path) -> None:
    stdout = io.StringIO()

    written = run(
        Settings(paths=[str(test_project)], claude_xml=True, extensions=[".go", ".txt"]),
        stdout,
    )

    out = stdout.getvalue()
    assert written == 3
    assert out.startswith("<documents>\n")
    assert out.endswith("</document>\n</documents>\n")
    positions = [out.index(f'<document index="{i}">') for i in (1, 2, 3)]
    assert positions == sorted(positions)
    assert '<document index="4">' not in out
    assert f'<document index="2">\n<source>{test_project / "src" / "main.go"}</source>' in out


@pytest.mark.unit
def test_run_claude_xml_without_files_still_writes_wrapper(tmp_path: Path) -> None:
    stdout = io.StringIO()

    written = run(Settings(paths=[str(tmp_path)], claude_xml=True, extensions=[".nothing"]), stdout)

    assert written == 0
    assert stdout.getvalue() == "<documents>\n</documents>\n"


@pytest.mark.unit
def test_run_single_file_claude_xml(test_project: Path) -> None:
    main_go = test_project / "src" / "main.go"
    stdout = io.StringIO()

    run(Settings(paths=[str(main_go)], claude_xml=True, extensions=[".go"]), stdout)

    assert stdout.getvalue() == (
        f'<documents>\n<document index="1">\n<source>{main_go}</source>\n'
        f"<document_content>\n{MAIN_GO}</document_content>\n</document>\n</documents>\n"
    )


@pytest.mark.unit
def test_run_processes_roots_in_order(test_project: Path) -> None:
    stdout = io.StringIO()

    run(
        Settings(paths=[str(test_project / "src"), str(test_project / "docs")], extensions=[".go", ".txt"]),
        stdout,
    )

    assert stdout.getvalue() == (
        f"{test_project / 'src' / 'main.go'}\n---\n{MAIN_GO}---\n\n"
        f"{test_project / 'docs' / 'README.txt'}\n---\nHello world---\n\n"
    )


@pytest.mark.unit
def test_run_skips_missing_root_and_continues(test_project: Path) -> None:
    stdout = io.StringIO()
    missing = test_project / "missing"

    with capture_logs() as logs:
        written = run(Settings(paths=[str(missing), str(test_project / "docs")]), stdout)

    assert written == 1
    assert stdout.getvalue() == f"{test_project / 'docs' / 'README.txt'}\n---\nHello world---\n\n"
    errors = [entry for entry in logs if entry["log_level"] == "error"]
    assert len(errors) == 1
    assert str(missing) in errors[0]["event"]


@pytest.mark.unit
def test_run_writes_output_file(test_project: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.md"
    stdout = io.StringIO()

    run(
        Settings(paths=[str(test_project / "src")], markdown=True, output_file=str(output)),
        stdout,
    )

    assert not stdout.getvalue()
    assert output.read_text(encoding="utf-8") == f"{test_project / 'src' / 'main.go'}\n```go\n{MAIN_GO}```\n"


@pytest.mark.unit
def test_open_sink_fails_when_file_cannot_be_created(tmp_path: Path) -> None:
    with pytest.raises(OutputFileError), open_sink(str(tmp_path / "missing" / "out.txt")):
        pass


@pytest.mark.unit
def test_run_reads_gitignore_next_to_roots(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.md\n", encoding="utf-8")
    project = tmp_path / "project"
    project.mkdir()
    (project / "notes.md").write_text("notes", encoding="utf-8")
    (project / "code.py").write_text("code", encoding="utf-8")
    stdout = io.StringIO()

    run(Settings(paths=[str(project)], ignore_gitignore=True), stdout)

    assert stdout.getvalue() == f"{project / 'code.py'}\n---\ncode---\n\n"


@pytest.mark.unit
def test_rules_found_under_one_root_do_not_apply_to_the_next(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / ".gitignore").write_text("*.txt\n", encoding="utf-8")
    (first / "drop.txt").write_text("drop", encoding="utf-8")
    (second / "keep.txt").write_text("keep", encoding="utf-8")
    stdout = io.StringIO()

    run(Settings(paths=[str(first), str(second)], ignore_gitignore=True), stdout)

    assert stdout.getvalue() == f"{second / 'keep.txt'}\n---\nkeep---\n\n"


@pytest.mark.unit
def test_seed_rules_reads_parent_directories(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("build/\n", encoding="utf-8")

    rules = seed_rules([str(tmp_path / "a"), str(tmp_path / "b")])

    assert list(rules) == ["build/", "build/"]


@pytest.mark.unit
def test_seed_rules_uses_directory_of_root_given_with_trailing_slash(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n", encoding="utf-8")
    project = tmp_path / "project"
    project.mkdir()
    (project / ".gitignore").write_text("*.md\n", encoding="utf-8")

    rules = seed_rules([f"{project}/"])

    assert list(rules) == ["*.md"]


@pytest.mark.unit
def test_run_writes_non_utf8_bytes_unchanged(tmp_path: Path) -> None:
    source = tmp_path / "latin1.txt"
    source.write_bytes(b"caf\xe9\n")
    output = tmp_path / "out.txt"

    run(Settings(paths=[str(source)], output_file=str(output)))

    assert output.read_bytes() == f"{source}\n---\n".encode() + b"caf\xe9\n---\n\n"
