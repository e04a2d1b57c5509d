from __future__ import annotations

from enum import StrEnum, auto


class OutputFormat(StrEnum):
    """Wire format used to serialize each selected file.

    Exactly one format is active per run. Markdown wins over Claude XML when
    both switches are set, and plain is the fallback.
    """

    PLAIN = auto()
    MARKDOWN = auto()
    CLAUDE_XML = auto()


HIDDEN_PREFIX = "."
GITIGNORE_FILENAME = ".gitignore"
CURRENT_DIRECTORY = "."

LINE_NUMBER_SEPARATOR = "│"
PLAIN_DELIMITER = "---"
MIN_FENCE = "```"

XML_PROLOGUE = "<documents>\n"
XML_EPILOGUE = "</documents>\n"

EXT2LANG: dict[str, str] = {
    ".c": "c",
    ".cpp": "cpp",
    ".css": "css",
    ".go": "go",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".py": "python",
    ".rb": "ruby",
    ".sh": "bash",
    ".ts": "typescript",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
}

ENV_FIELDS: dict[str, str] = {
    "PATHS": "paths",
    "EXTENSIONS": "extensions",
    "INCLUDE_HIDDEN": "include_hidden",
    "IGNORE_GITIGNORE": "ignore_gitignore",
    "IGNORE_PATTERNS": "ignore_patterns",
    "OUTPUT_FILE": "output_file",
    "CLAUDE_XML": "claude_xml",
    "LINE_NUMBERS": "line_numbers",
    "MARKDOWN": "markdown",
    "NULL": "null",
}


def guess_language(extension: str) -> str:
    """Get the code fence language tag for a file extension.

    Args:
        extension (str): The dotted extension, e.g. ``.py``.

    Returns:
        str: The language tag, or an empty string if the extension is unknown.
    """
    return EXT2LANG.get(extension.lower(), "")
