from __future__ import annotations

from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from files2prompt.config import (
    LINE_NUMBER_SEPARATOR,
    MIN_FENCE,
    PLAIN_DELIMITER,
    OutputFormat,
    guess_language,
)
from files2prompt.logging import logger

if TYPE_CHECKING:
    from typing import TextIO

    from files2prompt.settings import Settings


class DocumentIndex:
    """Running 1-based ordinal of the documents written in Claude XML mode.

    One instance is created per run and handed to every encoding call.
    """

    def __init__(self, start: int = 1) -> None:
        self.value = start

    def take(self) -> int:
        """Return the current index and advance to the next one."""
        current = self.value
        self.value += 1
        return current


def file_extension(name: str) -> str:
    """Return the suffix from the last dot of ``name``, dot included.

    ``".bashrc"`` yields ``".bashrc"`` and ``"Makefile"`` yields ``""``.
    """
    _, dot, suffix = name.rpartition(".")
    return dot + suffix if dot else ""


def number_lines(content: str) -> str:
    """Prefix every line of ``content`` with its right-aligned line number.

    The content is split on ``\\n`` and each line is written back with a
    trailing newline, so a final newline in ``content`` yields a last, empty,
    numbered line.

    Args:
        content (str): the file content

    Returns:
        str: the numbered content
    """
    lines = content.split("\n")
    width = len(str(len(lines)))
    return "".join(f"{n: {width}d} {LINE_NUMBER_SEPARATOR} {line}\n" for n, line in enumerate(lines, start=1))


def fence_for(content: str) -> str:
    """Pick a backtick fence that does not occur anywhere in ``content``."""
    fence = MIN_FENCE
    while fence in content:
        fence += "`"
    return fence


def render_document(
    display_path: str,
    content: str,
    output_format: OutputFormat,
    index: DocumentIndex,
    *,
    line_numbers: bool = False,
) -> str:
    """Render one file in the requested output format.

    Args:
        display_path (str): the path written in the document header
        content (str): the decoded file content
        output_format (OutputFormat): plain, markdown or claude_xml
        index (DocumentIndex): the run's document index, advanced in XML mode
        line_numbers (bool): prefix lines with their number

    Returns:
        str: the serialized document
    """
    body = number_lines(content) if line_numbers else content

    if output_format is OutputFormat.MARKDOWN:
        fence = fence_for(body)
        lang = guess_language(file_extension(PurePath(display_path).name))
        return f"{display_path}\n{fence}{lang}\n{body}{fence}\n"
    if output_format is OutputFormat.CLAUDE_XML:
        return (
            f'<document index="{index.take()}">\n'
            f"<source>{display_path}</source>\n"
            f"<document_content>\n{body}</document_content>\n"
            "</document>\n"
        )
    return f"{display_path}\n{PLAIN_DELIMITER}\n{body}{PLAIN_DELIMITER}\n\n"


def encode_file(path: str | Path, settings: Settings, sink: TextIO, index: DocumentIndex) -> bool:
    """Read a file and write its encoding to ``sink``.

    A file that cannot be read is logged and skipped. Write failures propagate.

    Args:
        path (str | Path): the file to encode, displayed exactly as given
        settings (Settings): the run settings
        sink (TextIO): the output stream
        index (DocumentIndex): the run's document index

    Returns:
        bool: True if the file was written, False if it was skipped
    """
    # undecodable bytes ride along as surrogates; the sink writes them back unchanged
    try:
        content = Path(path).read_bytes().decode("utf-8", errors="surrogateescape")
    except OSError as e:
        logger.warning("Skipping file %s due to error: %s", path, e)
        return False

    sink.write(
        render_document(
            str(path),
            content,
            settings.output_format,
            index,
            line_numbers=settings.line_numbers,
        ),
    )
    return True
