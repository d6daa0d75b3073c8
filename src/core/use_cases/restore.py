"""
Restore use case — locate nuget.exe, then restore with retries.

The full vertical slice from CLI request to exit code. Adapters
default to the real machine; callers (tests, mainly) may pass their
own.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.adapters.base import Downloader, EnvironmentReader, FileSystemReader, ProcessRunner
from src.adapters.network.download import UrlDownloader
from src.adapters.shell.command import SubprocessRunner
from src.adapters.shell.filesystem import LocalFileSystem, OsEnvironment
from src.core.models.restore import LocatedBinary, RestoreOutcome, RestoreRequest
from src.core.observability.build_log import BuildLog
from src.core.services.locator import LocatorContext, locate_binary
from src.core.services.restore import RestoreOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    """Result of a restore run."""

    binary: LocatedBinary | None = None
    outcome: RestoreOutcome | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not None and self.outcome.succeeded

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
        if self.binary:
            result["binary"] = {
                "executable": self.binary.executable,
                "source": self.binary.source.value,
            }
        if self.outcome:
            result["attempts"] = self.outcome.attempts
        return result


def run_restore(
    request: RestoreRequest,
    *,
    env: EnvironmentReader | None = None,
    fs: FileSystemReader | None = None,
    runner: ProcessRunner | None = None,
    downloader: Downloader | None = None,
    build_log: BuildLog | None = None,
    sleep: Callable[[float], None] | None = None,
) -> RestoreResult:
    """Locate the restore executable and run it until it succeeds.

    Args:
        request: Solution file, attempt ceiling and package sources.
        env: Environment variable reader.
        fs: Filesystem reader.
        runner: Process launcher.
        downloader: HTTP downloader for the last-resort fetch.
        build_log: Build-log writer.
        sleep: Pause between failed attempts (default ``time.sleep``).

    Returns:
        RestoreResult; ``exit_code`` is what the process should exit with.
    """
    build_log = build_log or BuildLog()
    ctx = LocatorContext(
        env=env or OsEnvironment(),
        fs=fs or LocalFileSystem(),
        downloader=downloader or UrlDownloader(),
        build_log=build_log,
    )

    binary = locate_binary(ctx)
    if binary is None:
        build_log.message("Could not find nuget.exe")
        return RestoreResult(error="nuget.exe not found")

    orchestrator = RestoreOrchestrator(
        runner=runner or SubprocessRunner(),
        build_log=build_log,
        sleep=sleep or time.sleep,
    )
    outcome = orchestrator.run(binary, request)
    logger.info(
        "Restore %s after %d attempt(s)",
        "succeeded" if outcome.succeeded else "failed",
        outcome.attempts,
    )

    result = RestoreResult(binary=binary, outcome=outcome)
    if not outcome.succeeded:
        result.error = f"Restore failed after {outcome.attempts} attempts"
    return result
