from __future__ import annotations

import io
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from files2prompt.config import XML_EPILOGUE, XML_PROLOGUE, OutputFormat
from files2prompt.encoding import DocumentIndex
from files2prompt.exceptions import NoPathsProvidedError, OutputFileError, RootPathError
from files2prompt.ignore_rules import IgnoreRules, read_gitignore
from files2prompt.logging import logger
from files2prompt.traversal import process_path

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from typing import TextIO

    from files2prompt.settings import Settings

SINK_ERRORS = "surrogateescape"


@contextmanager
def open_sink(output_file: str, stdout: TextIO | None = None) -> Iterator[TextIO]:
    """Open the single output stream of a run.

    Output is always UTF-8, whatever the locale, and bytes that were not valid
    UTF-8 in the source files are written back as they were read.

    Args:
        output_file (str): file to create or truncate; empty selects stdout
        stdout (TextIO | None): stream used instead of ``sys.stdout``

    Raises:
        OutputFileError: if the output file cannot be created

    Yields:
        Iterator[TextIO]: the writable stream
    """
    if output_file:
        target = Path(output_file)
        try:
            handle = target.open("w", encoding="utf-8", errors=SINK_ERRORS, newline="")
        except OSError as e:
            raise OutputFileError(path=target, reason=str(e)) from e
        with handle:
            yield handle
        return

    if stdout is not None:
        yield stdout
        return

    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        yield sys.stdout
        return
    sys.stdout.flush()
    sink = io.TextIOWrapper(buffer, encoding="utf-8", errors=SINK_ERRORS, newline="", write_through=True)
    try:
        yield sink
    finally:
        # leave sys.stdout usable once the run is over
        sink.detach()


def seed_rules(paths: Sequence[str]) -> IgnoreRules:
    """Collect the ``.gitignore`` rules sitting next to each configured root.

    Args:
        paths (Sequence[str]): the configured roots

    Returns:
        IgnoreRules: rules read from the parent directory of every root
    """
    rules = IgnoreRules()
    for path in paths:
        rules.extend(read_gitignore(Path(os.path.dirname(path))) or [])  # noqa: PTH120
    return rules


def write_roots(settings: Settings, sink: TextIO) -> int:
    """Write every configured root to ``sink``, with the format's wrapper.

    Roots that cannot be processed are logged and skipped.

    Args:
        settings (Settings): the run settings
        sink (TextIO): the output stream

    Returns:
        int: the number of files written
    """
    index = DocumentIndex()
    seed = seed_rules(settings.paths) if settings.ignore_gitignore else IgnoreRules()
    xml = settings.output_format is OutputFormat.CLAUDE_XML
    written = 0

    if xml:
        sink.write(XML_PROLOGUE)
    for path in settings.paths:
        try:
            written += process_path(path, settings, sink, index, seed.copy())
        except (RootPathError, OSError) as e:
            logger.error("Error processing path %s: %s", path, e)
    if xml:
        sink.write(XML_EPILOGUE)
    return written


def run(settings: Settings, stdout: TextIO | None = None) -> int:
    """Run files2prompt with fully resolved settings.

    Args:
        settings (Settings): the run settings
        stdout (TextIO | None): stream used when no output file is configured

    Raises:
        NoPathsProvidedError: if no root path is configured
        OutputFileError: if the output file cannot be created

    Returns:
        int: the number of files written
    """
    logger.debug("Running with settings %s", settings.model_dump_json())
    if not settings.paths:
        raise NoPathsProvidedError
    with open_sink(settings.output_file, stdout) as sink:
        written = write_roots(settings, sink)
    logger.debug("Wrote %d files", written)
    return written
