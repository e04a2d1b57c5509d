"""Render a roff manual page from the argparse parser."""

from __future__ import annotations

import argparse
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


def _escape(text: str) -> str:
    return text.replace("\\", "\\e").replace("-", "\\-")


def _option_lines(parser: argparse.ArgumentParser) -> Iterator[str]:
    for action in parser._actions:  # noqa: SLF001
        if not action.option_strings:
            continue
        flags = ", ".join(f"\\fB{_escape(opt)}\\fR" for opt in action.option_strings)
        if action.nargs != 0:
            flags += f" \\fI{_escape(action.metavar or action.dest.upper())}\\fR"
        yield ".TP"
        yield flags
        yield _escape(action.help or "")


def render_manpage(parser: argparse.ArgumentParser, section: int = 1) -> str:
    """Render the manual page of ``parser``.

    Args:
        parser (argparse.ArgumentParser): the CLI parser
        section (int): manual section

    Returns:
        str: the page in roff format
    """
    prog = parser.prog
    date = datetime.now(UTC).strftime("%b %Y")
    lines = [
        f'.TH "{prog.upper()}" "{section}" "{date}" "{prog}" "{prog} Manual"',
        ".SH NAME",
        f"{_escape(prog)} \\- {_escape(parser.description or '')}",
        ".SH SYNOPSIS",
        f"\\fB{_escape(prog)}\\fP [flags] [paths...]",
        ".SH DESCRIPTION",
        _escape(parser.epilog or parser.description or ""),
        ".SH OPTIONS",
        *_option_lines(parser),
    ]
    return "\n".join(lines) + "\n"
