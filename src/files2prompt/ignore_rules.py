from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING

from files2prompt.config import GITIGNORE_FILENAME
from files2prompt.logging import logger
from files2prompt.matching import match, match_any

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from pathlib import Path


def read_gitignore(directory: Path) -> list[str] | None:
    """Read the ignore rules declared in ``directory/.gitignore``.

    Blank lines and ``#`` comments are dropped, every other line is stripped
    and kept verbatim.

    Args:
        directory (Path): the directory that may hold a ``.gitignore``

    Returns:
        list[str] | None: the rules, or None when the file is missing,
            unreadable or declares no rule
    """
    gitignore = directory / GITIGNORE_FILENAME
    try:
        content = gitignore.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None

    rules: list[str] = []
    for line in content.split("\n"):
        line = line.strip()  # noqa: PLW2901
        if line and not line.startswith("#"):
            rules.append(line)
    return rules or None


def split_patterns(patterns: Iterable[str]) -> list[str]:
    """Split comma-joined ignore patterns into trimmed sub-patterns.

    Args:
        patterns (Iterable[str]): configured patterns, each possibly ``"a,b/"``

    Returns:
        list[str]: the non-empty sub-patterns, in order
    """
    out: list[str] = []
    for pattern in patterns:
        for sub in pattern.split(","):
            sub = sub.strip()  # noqa: PLW2901
            if sub:
                out.append(sub)
    return out


def _rule_matches(rule: str, path: str, base: str) -> bool:
    if match(rule, base) or match(rule, path):
        return True
    if rule.endswith("/"):
        directory = rule.removesuffix("/")
        return match(directory, base) or match(directory + "/**", path)
    if "/" in path:
        parent = posixpath.dirname(path)
        return match(rule + "/", path + "/") or match(rule, parent)
    return False


def should_ignore(path: str, rules: Sequence[str], name: str | None = None) -> bool:
    """Decide whether a path is excluded by gitignore-style rules.

    Each rule is tried against the base name and the whole path. A rule ending
    in ``/`` also matches the directory by name and everything below it. When
    the path has several segments, a plain rule also matches its parent part.

    Args:
        path (str): POSIX path relative to the walked root
        rules (Sequence[str]): the rules in effect
        name (str | None): base name to test, defaults to the last segment of ``path``

    Returns:
        bool: True if any rule matches
    """
    base = posixpath.basename(path) if name is None else name
    return any(_rule_matches(rule, path, base) for rule in rules)


def matches_ignore_pattern(rel: str, name: str, *, is_dir: bool, patterns: Sequence[str]) -> bool:
    """Apply the explicit ``--ignore`` sub-patterns to one traversal entry.

    Args:
        rel (str): POSIX path relative to the walked root
        name (str): the entry base name
        is_dir (bool): whether the entry is a directory
        patterns (Sequence[str]): sub-patterns already split by `split_patterns`

    Returns:
        bool: True if the entry must be skipped
    """
    if match_any(patterns, name) or match_any(patterns, rel):
        return True
    if not is_dir:
        return False
    return match_any([p.removesuffix("/") for p in patterns if p.endswith("/")], name)


class IgnoreRules:
    """Append-only list of gitignore rules gathered while walking.

    Rules found in a directory stay in effect for everything visited after it,
    not only for that directory's descendants.
    """

    def __init__(self, rules: Iterable[str] = ()) -> None:
        self._rules: list[str] = list(rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def extend(self, rules: Iterable[str]) -> None:
        self._rules.extend(rules)

    def discover(self, directory: Path) -> list[str]:
        """Append the rules of ``directory/.gitignore``, if any, and return them."""
        found = read_gitignore(directory) or []
        if found:
            logger.debug("Loaded %d ignore rules from %s", len(found), directory / GITIGNORE_FILENAME)
            self._rules.extend(found)
        return found

    def copy(self) -> IgnoreRules:
        return IgnoreRules(self._rules)

    def matches(self, path: str, name: str | None = None) -> bool:
        return should_ignore(path, self._rules, name)
