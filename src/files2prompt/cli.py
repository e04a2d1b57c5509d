"""
files2prompt: concatenate a directory full of files into a single prompt for LLMs.

Overview
--------
Every path given on the command line (or read from stdin) is crawled
depth-first. Hidden entries, entries matched by ``.gitignore`` files or by
``--ignore`` patterns, and files outside the ``--extension`` allow-list are
skipped. The remaining files are written to stdout or ``--output`` as:

1) **plain** text, each file between ``---`` delimiters (default),
2) **Markdown** fenced code blocks (``--markdown``),
3) **Claude XML** ``<documents>`` (``--cxml``).

Each option can also be set from the environment or from a ``.env`` file in
the working directory (``EXTENSIONS``, ``INCLUDE_HIDDEN``, ``IGNORE_GITIGNORE``,
``IGNORE_PATTERNS``, ``OUTPUT_FILE``, ``CLAUDE_XML``, ``LINE_NUMBERS``,
``MARKDOWN``, ``NULL``, ``PATHS``). Flags given on the command line win.

Usage
-----
    files2prompt src -e .py -e .toml --markdown
    find . -name '*.go' -print0 | files2prompt --null --cxml -o prompt.xml
    files2prompt . --ignore-gitignore --ignore "dist/,*.lock" -n
    files2prompt version
    files2prompt man > files2prompt.1
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING, Any

from files2prompt import __version__
from files2prompt.exceptions import Files2PromptError
from files2prompt.logging import logger, setup_logging
from files2prompt.man import render_manpage
from files2prompt.output_construction import run
from files2prompt.settings import env_layer, merge_layers
from files2prompt.version import get_version_info

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import TextIO

PROG = "files2prompt"


def build_parser() -> argparse.ArgumentParser:
    """Build the parser of the main command.

    Options default to ``argparse.SUPPRESS`` so that only the flags the user
    actually passed end up in the parsed namespace.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    p = argparse.ArgumentParser(
        prog=PROG,
        description="Crawl and output file contents with various filtering options for AI prompting",
        epilog=(
            "files2prompt helps prepare files for AI prompts by crawling directories "
            "and outputting file contents with optional filtering and formatting."
        ),
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("paths", nargs="*", default=[], help="Files or directories to crawl.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-d", "--debug", action="store_true", help="Enable debug-level logging.")
    p.add_argument("--log-file", type=str, help="Log file path.")
    p.add_argument(
        "-e",
        "--extension",
        dest="extensions",
        action="append",
        metavar="EXT",
        help="File extensions to include (repeatable or comma-separated, e.g. .py,.go).",
    )
    p.add_argument(
        "--include-hidden",
        action="store_true",
        help="Include hidden files and folders.",
    )
    p.add_argument(
        "--ignore-gitignore",
        action="store_true",
        help="Skip files and folders matched by .gitignore files.",
    )
    p.add_argument(
        "--ignore",
        dest="ignore_patterns",
        action="append",
        metavar="PATTERN",
        help=(
            "Patterns to ignore (can be comma-separated or specified multiple times). "
            "Use '/' suffix to match directories only. Examples: "
            "'*.test.js', 'test/', 'path/to/ignore/', 'dir1/,dir2/'."
        ),
    )
    p.add_argument("-o", "--output", dest="output_file", type=str, metavar="FILE", help="Output file path.")
    p.add_argument("-c", "--cxml", dest="claude_xml", action="store_true", help="Output in XML format for Claude.")
    p.add_argument("-n", "--line-numbers", action="store_true", help="Display line numbers in output.")
    p.add_argument(
        "-m",
        "--markdown",
        action="store_true",
        help="Output in Markdown format with fenced code blocks.",
    )
    p.add_argument(
        "-0",
        "--null",
        action="store_true",
        help="Use NUL character as separator when reading from stdin.",
    )
    return p


def split_csv(values: Sequence[str]) -> list[str]:
    """Flatten repeated, comma-separated option values.

    Args:
        values (Sequence[str]): raw option values, e.g. ``[".py,.go", ".md"]``

    Returns:
        list[str]: the trimmed, non-empty items
    """
    return [item.strip() for value in values for item in value.split(",") if item.strip()]


def parse_flags(argv: Sequence[str] | None = None) -> dict[str, Any]:
    """Parse the command line into the flags the user explicitly set.

    Args:
        argv (Sequence[str] | None): Optional CLI arguments.

    Returns:
        dict[str, Any]: settings field names mapped to their flag values;
            ``paths`` is always present
    """
    flags = vars(build_parser().parse_args(argv))
    if "extensions" in flags:
        flags["extensions"] = split_csv(flags["extensions"])
    return flags


def read_paths_from_stdin(use_null: bool, stream: TextIO | None = None) -> list[str]:  # noqa: FBT001
    """Read extra root paths piped on stdin.

    Nothing is read from an interactive terminal.

    Args:
        use_null (bool): paths are NUL separated instead of whitespace separated
        stream (TextIO | None): stream to read, defaults to ``sys.stdin``

    Returns:
        list[str]: the non-empty paths, in order
    """
    stream = sys.stdin if stream is None else stream
    try:
        if stream is None or stream.isatty():
            return []
        content = stream.read()
    except (OSError, ValueError) as e:
        logger.debug("Not reading paths from stdin: %s", e)
        return []
    paths = content.split("\0") if use_null else content.split()
    return [p for p in paths if p]


def version_main(argv: Sequence[str]) -> int:
    """Print the version and build information as JSON.

    Returns:
        int: Process exit code.
    """
    argparse.ArgumentParser(
        prog=f"{PROG} version",
        description="Print the version and build information.",
    ).parse_args(argv)
    sys.stdout.write(get_version_info().model_dump_json(indent=2) + "\n")
    return 0


def man_main(argv: Sequence[str]) -> int:
    """Print the manual page of files2prompt in roff format.

    Returns:
        int: Process exit code.
    """
    argparse.ArgumentParser(
        prog=f"{PROG} man",
        description="Generates files2prompt's command line manpages",
    ).parse_args(argv)
    sys.stdout.write(render_manpage(build_parser()))
    return 0


SUBCOMMANDS: dict[str, Callable[[Sequence[str]], int]] = {
    "version": version_main,
    "man": man_main,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the files2prompt command line.

    Args:
        argv (Sequence[str] | None): Optional CLI arguments, defaults to ``sys.argv[1:]``.

    Returns:
        int: Process exit code, 1 on a fatal error.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in SUBCOMMANDS:
        return SUBCOMMANDS[args[0]](args[1:])

    flags = parse_flags(args)
    cli_paths = flags.pop("paths")
    setup_logging(flags.get("log_file") or None, debug=bool(flags.get("debug")))

    try:
        env = env_layer()
        settings = merge_layers(env, flags)
        paths = [*cli_paths, *read_paths_from_stdin(settings.null)]
        if paths:
            settings = merge_layers(env, flags, {"paths": paths})
        run(settings)
    except Files2PromptError as e:
        logger.error("files2prompt failed: %s", e)
        sys.stderr.write(f"{e}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
