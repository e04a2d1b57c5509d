from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from files2prompt.config import CURRENT_DIRECTORY, HIDDEN_PREFIX
from files2prompt.encoding import encode_file, file_extension
from files2prompt.exceptions import RootPathError
from files2prompt.ignore_rules import IgnoreRules, matches_ignore_pattern, split_patterns
from files2prompt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import TextIO

    from files2prompt.encoding import DocumentIndex
    from files2prompt.settings import Settings

ROOT_REL = "."


@dataclass(frozen=True)
class TraversalEntry:
    """A file or directory met during a walk.

    Attributes:
        path: Path as displayed, i.e. the root path joined with ``rel``.
        rel: POSIX path relative to the walked root (``"."`` for the root).
        name: Base name of the entry.
        is_dir: Whether the entry is a directory (symlinks are not followed).
    """

    path: Path
    rel: str
    name: str
    is_dir: bool


def walk_tree(root: Path, visit: Callable[[TraversalEntry], bool]) -> None:
    """Walk ``root`` depth-first, visiting each directory before its content.

    Entries of a directory are visited in lexicographic order of their names.
    Returning False from ``visit`` for a directory prunes its subtree.

    Args:
        root (Path): the directory to walk
        visit (Callable[[TraversalEntry], bool]): called once per entry

    Raises:
        OSError: if a directory cannot be listed
    """

    def descend(directory: Path, rel: str) -> None:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
        for child in children:
            child_rel = child.name if rel == ROOT_REL else f"{rel}/{child.name}"
            entry = TraversalEntry(
                path=directory / child.name,
                rel=child_rel,
                name=child.name,
                is_dir=child.is_dir(follow_symlinks=False),
            )
            if visit(entry) and entry.is_dir:
                descend(entry.path, child_rel)

    if visit(TraversalEntry(path=root, rel=ROOT_REL, name=root.name, is_dir=True)):
        descend(root, ROOT_REL)


class EntryFilter:
    """Ordered filter chain deciding which entries of one root survive.

    The filters run in a fixed order (hidden, gitignore, explicit patterns,
    extension) and the first one that rejects an entry wins.
    """

    def __init__(self, settings: Settings, rules: IgnoreRules) -> None:
        self.settings = settings
        self.rules = rules
        self.patterns = split_patterns(settings.ignore_patterns)
        self.extensions = set(settings.extensions)

    def is_hidden(self, entry: TraversalEntry) -> bool:
        return not self.settings.include_hidden and entry.name.startswith(HIDDEN_PREFIX)

    def is_gitignored(self, entry: TraversalEntry) -> bool:
        if not self.settings.ignore_gitignore:
            return False
        if entry.is_dir:
            self.rules.discover(entry.path)
        return self.rules.matches(entry.rel, entry.name)

    def is_pattern_ignored(self, entry: TraversalEntry) -> bool:
        if not self.patterns:
            return False
        return matches_ignore_pattern(entry.rel, entry.name, is_dir=entry.is_dir, patterns=self.patterns)

    def is_filtered_extension(self, entry: TraversalEntry) -> bool:
        if entry.is_dir or not self.extensions:
            return False
        return file_extension(entry.name) not in self.extensions

    def accept(self, entry: TraversalEntry) -> bool:
        """Return True if the entry survives every filter."""
        if self.is_hidden(entry):
            logger.debug("Skipping hidden %s", entry.path)
            return False
        if self.is_gitignored(entry):
            logger.debug("Skipping gitignored %s", entry.path)
            return False
        if self.is_pattern_ignored(entry):
            logger.debug("Skipping ignored %s", entry.path)
            return False
        return not self.is_filtered_extension(entry)


def resolve_root(path: str) -> Path:
    """Turn a configured root into a path, expanding the ``.`` sentinel.

    Raises:
        RootPathError: if the working directory cannot be determined
    """
    if path != CURRENT_DIRECTORY:
        return Path(path)
    try:
        return Path.cwd()
    except OSError as e:
        raise RootPathError(path=path, reason=f"failed to get working directory: {e}") from e


def process_path(
    path: str,
    settings: Settings,
    sink: TextIO,
    index: DocumentIndex,
    rules: IgnoreRules | None = None,
) -> int:
    """Encode every selected file under one configured root.

    A root that is not a directory is encoded as-is, without filtering, and
    displayed exactly as it was given.

    Args:
        path (str): the configured root
        settings (Settings): the run settings
        sink (TextIO): the output stream
        index (DocumentIndex): the run's document index
        rules (IgnoreRules | None): gitignore rules in effect when the walk
            starts; this object is extended in place as the walk goes

    Raises:
        RootPathError: if the root cannot be resolved or stat'd
        OSError: if a directory cannot be listed or the sink fails

    Returns:
        int: the number of files written
    """
    root = resolve_root(path)
    try:
        st = root.stat()
    except OSError as e:
        raise RootPathError(path=path, reason=str(e)) from e

    if not stat.S_ISDIR(st.st_mode):
        return int(encode_file(path, settings, sink, index))

    entry_filter = EntryFilter(settings, rules if rules is not None else IgnoreRules())
    written = 0

    def visit(entry: TraversalEntry) -> bool:
        nonlocal written
        if not entry_filter.accept(entry):
            return False
        if not entry.is_dir and encode_file(entry.path, settings, sink, index):
            written += 1
        return True

    walk_tree(root, visit)
    return written
