"""
Adapter base — the capability contracts between core and the machine.

The core never reads environment variables, touches the filesystem,
starts processes or opens sockets directly. It is handed one adapter
per concern, so tests can swap any of them for an in-memory double
(see mock.py).

Adapters perform side effects and report outcomes through return
values. They NEVER raise across this boundary — failures are captured
in the result (an exit code, a DownloadResult, ``None``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class DownloadResult(BaseModel):
    """Outcome of fetching a URL to a local file."""

    ok: bool
    url: str
    dest: str
    size_bytes: int = 0
    error: str | None = None


class EnvironmentReader(ABC):
    """Read access to process environment variables."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the variable's value, or None when unset."""


class FileSystemReader(ABC):
    """Read-only file queries used by config resolution and discovery."""

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """True if ``path`` names an existing regular file."""

    @abstractmethod
    def file_size(self, path: str) -> int:
        """Size in bytes, or 0 when the file is missing or unreadable."""

    @abstractmethod
    def read_lines(self, path: str) -> list[str]:
        """Return the file's lines without line terminators.

        The one method allowed to raise ``OSError``: callers decide
        whether an unreadable file is fatal.
        """


class ProcessRunner(ABC):
    """Launch an executable and wait for it."""

    @abstractmethod
    def run(self, executable: str, args: list[str]) -> int:
        """Run to completion and return the exit code.

        Output is not captured; it streams to the console so the build
        log shows it live. A process that cannot be started reports -1.
        """


class Downloader(ABC):
    """Fetch a URL to a local file."""

    @abstractmethod
    def download(self, url: str, dest: str) -> DownloadResult:
        """Download ``url`` into ``dest``, replacing it."""
