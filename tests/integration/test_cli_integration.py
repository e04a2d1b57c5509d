import io
from pathlib import Path

import pytest

from files2prompt import cli


@pytest.mark.integration
@pytest.mark.usefixtures("clean_env")
def test_main_honours_gitignore_and_writes_markdown_file(test_project: Path) -> None:
    (test_project / "src" / "util.py").write_text("print('```')\n", encoding="utf-8")
    output = test_project.parent / "prompt.md"

    exit_code = cli.main([str(test_project), "--ignore-gitignore", "--markdown", "-o", str(output)])

    assert exit_code == 0
    content = output.read_text(encoding="utf-8")
    assert content == (
        f"{test_project / 'docs' / 'README.txt'}\n```\nHello world```\n"
        f"{test_project / 'src' / 'main.go'}\n```go\npackage main\n\nfunc main() {{}}\n```\n"
        f"{test_project / 'src' / 'util.py'}\n````python\nprint('```')\n````\n"
    )


@pytest.mark.integration
@pytest.mark.usefixtures("clean_env")
def test_main_reads_settings_from_dotenv(test_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    Path(".env").write_text(
        f"PATHS={test_project / 'src'},{test_project / 'docs'}\nCLAUDE_XML=true\nLINE_NUMBERS=true\n",
        encoding="utf-8",
    )

    exit_code = cli.main([])

    assert exit_code == 0
    assert capsys.readouterr().out == (
        "<documents>\n"
        f'<document index="1">\n<source>{test_project / "src" / "main.go"}</source>\n<document_content>\n'
        " 1 │ package main\n 2 │ \n 3 │ func main() {}\n 4 │ \n"
        "</document_content>\n</document>\n"
        f'<document index="2">\n<source>{test_project / "docs" / "README.txt"}</source>\n<document_content>\n'
        " 1 │ Hello world\n"
        "</document_content>\n</document>\n"
        "</documents>\n"
    )


@pytest.mark.integration
@pytest.mark.usefixtures("clean_env")
def test_main_null_separated_stdin(
    test_project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    spaced = test_project / "docs" / "with space.txt"
    spaced.write_text("spaced", encoding="utf-8")
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{spaced}\0"))

    exit_code = cli.main(["--null"])

    assert exit_code == 0
    assert capsys.readouterr().out == f"{spaced}\n---\nspaced---\n\n"
