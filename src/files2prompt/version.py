from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Mapping

DISTRIBUTION = "files2prompt"
UNKNOWN = "unknown"
LOCAL = "local"


class VersionInfo(BaseModel):
    """Version and build information of the installed tool."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(default=LOCAL, description="Package version.")
    commit: str = Field(default=UNKNOWN, description="Source commit.")
    branch: str = Field(default=UNKNOWN, description="Source branch.")
    built_at: str = Field(default=UNKNOWN, description="Build timestamp.")
    builder: str = Field(default=UNKNOWN, description="Who built the package.")


def get_version_info(environ: Mapping[str, str] | None = None) -> VersionInfo:
    """Collect version information.

    The version comes from the installed distribution metadata; build details
    come from ``FILES2PROMPT_COMMIT``, ``FILES2PROMPT_BRANCH``,
    ``FILES2PROMPT_BUILT_AT`` and ``FILES2PROMPT_BUILDER``.

    Args:
        environ (Mapping[str, str] | None): Environment to read, defaults to ``os.environ``.

    Returns:
        VersionInfo: the collected information
    """
    environ = os.environ if environ is None else environ
    try:
        pkg_version = version(DISTRIBUTION)
    except PackageNotFoundError:
        pkg_version = LOCAL
    return VersionInfo(
        version=pkg_version,
        commit=environ.get("FILES2PROMPT_COMMIT", UNKNOWN),
        branch=environ.get("FILES2PROMPT_BRANCH", UNKNOWN),
        built_at=environ.get("FILES2PROMPT_BUILT_AT", UNKNOWN),
        builder=environ.get("FILES2PROMPT_BUILDER", UNKNOWN),
    )
