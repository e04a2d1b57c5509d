from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from files2prompt.config import ENV_FIELDS, OutputFormat
from files2prompt.exceptions import ConfigurationError
from files2prompt.logging import logger

ENV_FILE = ".env"


class Settings(BaseModel):
    """Configuration settings for one files2prompt run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    paths: list[str] = Field(default_factory=list, description="Root paths to traverse.")
    extensions: list[str] = Field(default_factory=list, description="Accepted file extensions.")
    include_hidden: bool = Field(default=False, description="Include hidden files and folders.")
    ignore_gitignore: bool = Field(
        default=False,
        description="Skip entries matched by .gitignore files.",
    )
    ignore_patterns: list[str] = Field(default_factory=list, description="Patterns to ignore.")
    output_file: str = Field(default="", description="Output file, stdout when empty.")
    claude_xml: bool = Field(default=False, description="Output in XML format for Claude.")
    line_numbers: bool = Field(default=False, description="Prefix lines with their number.")
    markdown: bool = Field(default=False, description="Output Markdown fenced code blocks.")
    null: bool = Field(default=False, description="Stdin paths are NUL separated.")

    debug: bool = Field(default=False, description="Enable debug-level logging.")
    log_file: str = Field(default="", description="Log file path.")

    @field_validator("paths", "extensions", "ignore_patterns", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @property
    def output_format(self) -> OutputFormat:
        """Select the active encoding, Markdown taking precedence over XML."""
        if self.markdown:
            return OutputFormat.MARKDOWN
        if self.claude_xml:
            return OutputFormat.CLAUDE_XML
        return OutputFormat.PLAIN


def env_layer(
    environ: Mapping[str, str] | None = None,
    env_file: str | Path | None = None,
) -> dict[str, str]:
    """Collect settings from a ``.env`` file and the process environment.

    The ``.env`` file is only looked up in the current working directory.
    Process environment variables take priority over the file.

    Args:
        environ (Mapping[str, str] | None): Environment to read, defaults to ``os.environ``.
        env_file (str | Path | None): Explicit ``.env`` path, defaults to ``./.env``.

    Returns:
        dict[str, str]: Raw values keyed by settings field name.
    """
    environ = os.environ if environ is None else environ
    dotenv_path = Path(env_file) if env_file is not None else Path.cwd() / ENV_FILE

    merged: dict[str, str | None] = {}
    if dotenv_path.is_file():
        logger.debug("Loading %s", dotenv_path)
        merged.update(dotenv_values(dotenv_path))
    merged.update(environ)

    layer: dict[str, str] = {}
    for env_name, field in ENV_FIELDS.items():
        value = merged.get(env_name)
        if value is None or not value.strip():
            continue
        layer[field] = value
    return layer


def merge_layers(*layers: Mapping[str, Any]) -> Settings:
    """Merge configuration layers left to right and validate the result.

    Args:
        *layers (Mapping[str, Any]): Layers ordered from lowest to highest priority.

    Raises:
        ConfigurationError: if the merged values do not validate.

    Returns:
        Settings: The resolved settings.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(reason=str(e)) from e
    logger.debug("Resolved settings %s", settings.model_dump_json())
    return settings
