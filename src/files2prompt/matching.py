"""Glob matching with recursive ``**`` wildcards.

Patterns follow doublestar conventions: ``*`` and ``?`` never cross a ``/``,
a ``**`` path segment spans zero or more directories, ``[...]`` and
``{a,b}`` are supported and ``\\`` escapes the next character. A pattern is
always matched against the whole candidate.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING

from files2prompt.exceptions import PatternError
from files2prompt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable

SEPARATOR = "/"
GLOBSTAR = "**"


def _closing_bracket(pattern: str, start: int) -> int:
    """Return the index of the ``]`` closing the class opened at ``start``."""
    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern):
        if pattern[i] == "\\":
            i += 2
            continue
        if pattern[i] == "]":
            return i
        i += 1
    raise PatternError(pattern=pattern, reason="unclosed character class")


def _closing_brace(pattern: str, start: int) -> int:
    """Return the index of the ``}`` closing the alternation opened at ``start``."""
    depth = 0
    i = start
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "[":
            i = _closing_bracket(pattern, i) + 1
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise PatternError(pattern=pattern, reason="unclosed alternation")


def _split_top_level(pattern: str, sep: str) -> list[str]:
    """Split on ``sep`` outside of brackets, braces and escapes."""
    parts: list[str] = []
    buf: list[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            buf.append(pattern[i : i + 2])
            i += 2
            continue
        if c in "[{":
            end = _closing_bracket(pattern, i) if c == "[" else _closing_brace(pattern, i)
            buf.append(pattern[i : end + 1])
            i = end + 1
            continue
        if c == sep:
            parts.append("".join(buf))
            buf = []
        else:
            buf.append(c)
        i += 1
    parts.append("".join(buf))
    return parts


def _translate_class(body: str) -> str:
    negate = body[:1] in {"!", "^"}
    if negate:
        body = body[1:]
    out: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            out.append(re.escape(body[i + 1]))
            i += 2
            continue
        out.append(c if c == "-" else re.escape(c))
        i += 1
    chars = "".join(out)
    if negate:
        return f"[^/{chars}]"
    return f"[{chars}]"


def _translate_segment(pattern: str) -> str:
    """Translate a pattern fragment that never holds a globstar segment."""
    out: list[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            if i + 1 >= len(pattern):
                raise PatternError(pattern=pattern, reason="trailing escape")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif c == "*":
            while i < len(pattern) and pattern[i] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            end = _closing_bracket(pattern, i)
            out.append(_translate_class(pattern[i + 1 : end]))
            i = end + 1
        elif c == "{":
            end = _closing_brace(pattern, i)
            alternatives = _split_top_level(pattern[i + 1 : end], ",")
            out.append("(?:" + "|".join(_translate(alt) for alt in alternatives) + ")")
            i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


def _translate(pattern: str) -> str:
    segments = _split_top_level(pattern, SEPARATOR)
    out = ""
    last = len(segments) - 1
    for i, segment in enumerate(segments):
        if segment == GLOBSTAR:
            if i == last and out.endswith(SEPARATOR):
                # "a/**" also matches "a" itself
                out = out[: -len(SEPARATOR)] + "(?:/.*)?"
            elif i == last:
                out += ".*"
            else:
                out += "(?:.*/)?"
            continue
        out += _translate_segment(segment)
        if i != last:
            out += SEPARATOR
    return out


def translate(pattern: str) -> str:
    """Translate a glob pattern into an anchored regular expression source.

    Args:
        pattern (str): the glob pattern

    Raises:
        PatternError: if the pattern is malformed

    Returns:
        str: a regular expression matching exactly the candidates the glob accepts
    """
    return rf"(?s:{_translate(pattern)})\Z"


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile a glob pattern, or return None if it is malformed.

    A malformed pattern is reported once, then simply never matches.
    """
    try:
        return re.compile(translate(pattern))
    except (PatternError, re.error) as e:
        logger.warning("Ignoring malformed pattern %r: %s", pattern, e)
        return None


def match(pattern: str, candidate: str) -> bool:
    """Check whether ``candidate`` satisfies the glob ``pattern``.

    Args:
        pattern (str): the glob pattern
        candidate (str): a name or a POSIX relative path

    Returns:
        bool: True on a match; False on no match or a malformed pattern
    """
    compiled = compile_pattern(pattern)
    if compiled is None:
        return False
    return compiled.match(candidate) is not None


def match_any(patterns: Iterable[str], candidate: str) -> bool:
    """Check whether ``candidate`` satisfies at least one glob in ``patterns``."""
    return any(match(p, candidate) for p in patterns)
