"""
Restore orchestrator — run ``nuget restore`` until it works or we give up.

State machine over attempts 1..max_retries:

    exit == 0                      → Success!, statistic, stop (success)
    exit != 0, attempt < max       → warning, sleep RETRY_DELAY_SECONDS, next
    exit != 0, attempt == max      → error, statistic, stop (failure)

Every attempt runs inside its own build-log block so the build server
folds the restore output per try. The sleep only ever happens between
two attempts.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from src.adapters.base import ProcessRunner
from src.core.models.restore import AttemptResult, LocatedBinary, RestoreOutcome, RestoreRequest
from src.core.observability.build_log import BuildLog

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 5.0
STATISTIC_KEY = "NugetRestoreTries"


def build_restore_arguments(request: RestoreRequest) -> list[str]:
    """Command-line arguments for one restore attempt.

    Sources are only passed along with a solution file.
    """
    if request.solution_file is None:
        return ["restore"]

    args = ["restore", request.solution_file]
    for source in request.sources or ():
        args.extend(["-Source", source])
    return args


class RestoreOrchestrator:
    """Drive the retry loop for one located binary.

    Args:
        runner: Launches the restore executable.
        build_log: Where attempt blocks, warnings and statistics go.
        sleep: Pause function, replaced in tests.
        delay: Seconds between failed attempts.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        build_log: BuildLog,
        sleep: Callable[[float], None] = time.sleep,
        delay: float = RETRY_DELAY_SECONDS,
    ):
        self._runner = runner
        self._build_log = build_log
        self._sleep = sleep
        self._delay = delay

    def _attempt(
        self,
        attempt: int,
        binary: LocatedBinary,
        request: RestoreRequest,
    ) -> AttemptResult:
        with self._build_log.section(f"Nuget restore, try {attempt}"):
            if request.solution_file is None:
                self._build_log.message("Restoring")
            else:
                self._build_log.message(f"Restoring: '{request.solution_file}'")

            exit_code = self._runner.run(binary.executable, build_restore_arguments(request))

        logger.debug("Attempt %d/%d exit code %d", attempt, request.max_retries, exit_code)
        return AttemptResult(attempt=attempt, exit_code=exit_code)

    def run(self, binary: LocatedBinary, request: RestoreRequest) -> RestoreOutcome:
        """Restore with retries. Returns after the first success or the last failure."""
        attempt = 1
        while True:
            result = self._attempt(attempt, binary, request)

            if result.succeeded:
                self._build_log.success("Success!")
                self._build_log.statistic(STATISTIC_KEY, result.attempt)
                return RestoreOutcome(succeeded=True, attempts=result.attempt)

            if result.attempt >= request.max_retries:
                self._build_log.error(
                    f"Could not restore nuget packages, try {result.attempt}"
                )
                self._build_log.statistic(STATISTIC_KEY, result.attempt)
                return RestoreOutcome(succeeded=False, attempts=result.attempt)

            self._build_log.warning(f"Could not restore nuget packages, try {result.attempt}")
            self._sleep(self._delay)
            attempt += 1
