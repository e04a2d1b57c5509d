from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Files2PromptError(Exception):
    """Base exception for errors in the files2prompt package."""


@dataclass(frozen=True)
class NoPathsProvidedError(Files2PromptError):
    """Raised when neither arguments, stdin nor the environment supplied a path."""

    message: str = "no paths provided via arguments or stdin"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OutputFileError(Files2PromptError):
    """Raised when the configured output file cannot be created."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"failed to create output file {self.path}: {self.reason}"


@dataclass(frozen=True)
class ConfigurationError(Files2PromptError):
    """Raised when environment or flag values cannot be validated."""

    reason: str

    def __str__(self) -> str:
        return f"invalid configuration: {self.reason}"


@dataclass(frozen=True)
class RootPathError(Files2PromptError):
    """Raised when a root path cannot be resolved or stat'd."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"cannot process {self.path}: {self.reason}"


@dataclass(frozen=True)
class PatternError(Files2PromptError):
    """Raised by the glob compiler for a malformed pattern."""

    pattern: str
    reason: str

    def __str__(self) -> str:
        return f"bad pattern {self.pattern!r}: {self.reason}"
