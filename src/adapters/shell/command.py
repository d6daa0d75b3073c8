"""
Process adapter — launch the restore executable.

The one place where ``subprocess`` is called. The child inherits
stdout/stderr so its output lands in the build log between the
blockOpened/blockClosed lines of the attempt that started it.
"""

from __future__ import annotations

import logging
import subprocess
import time

from src.adapters.base import ProcessRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """Run a command synchronously and return its exit code.

    No timeout: a restore is allowed to take as long as it takes.
    """

    def run(self, executable: str, args: list[str]) -> int:
        cmd = [executable, *args]
        logger.debug("Executing: %s", subprocess.list2cmdline(cmd))
        start = time.monotonic()

        try:
            result = subprocess.run(cmd, check=False)
        except OSError as e:
            logger.error("Cannot start %s: %s", executable, e)
            return -1

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "%s exited with code %d after %dms", executable, result.returncode, elapsed_ms
        )
        return result.returncode
