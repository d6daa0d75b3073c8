"""
Restore models — the values threaded through a single restore run.

A run is: one RestoreRequest (from the CLI), at most one LocatedBinary
(from the locator), a stream of AttemptResults (consumed as they are
produced) and one RestoreOutcome at the end.
"""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

NUGET_EXE = "nuget.exe"
DEFAULT_MAX_RETRIES = 100


class RestoreRequest(BaseModel):
    """What the caller asked for. Built once from CLI arguments."""

    model_config = ConfigDict(frozen=True)

    solution_file: str | None = None
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)
    sources: tuple[str, ...] | None = None


class AttemptResult(BaseModel):
    """Exit status of one launch of the restore executable."""

    model_config = ConfigDict(frozen=True)

    attempt: int = Field(ge=1)
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class BinarySource(str, Enum):
    """Which discovery strategy produced a LocatedBinary."""

    TOOL_CACHE = "tool_cache"
    PATH = "path"
    LOCAL_CACHE = "local_cache"
    DOWNLOAD = "download"


class LocatedBinary(BaseModel):
    """A restore executable found on this machine.

    For ``BinarySource.PATH`` the location is the directory that holds
    ``nuget.exe``; every other source points at the file itself.
    """

    model_config = ConfigDict(frozen=True)

    location: str
    source: BinarySource

    @property
    def executable(self) -> str:
        """Path of the file to launch."""
        if self.source == BinarySource.PATH:
            return os.path.join(self.location, NUGET_EXE)
        return self.location


class RestoreOutcome(BaseModel):
    """Terminal state of the retry loop."""

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    attempts: int = Field(ge=1)
