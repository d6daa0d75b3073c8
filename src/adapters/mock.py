"""
Mock adapters — in-memory test doubles for every capability.

Used by the test suite to drive discovery and the retry loop without
touching the real environment, disk, processes or network. Each double
records its calls so tests can assert on what was (or wasn't) done.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.adapters.base import (
    Downloader,
    DownloadResult,
    EnvironmentReader,
    FileSystemReader,
    ProcessRunner,
)


class MockEnvironment(EnvironmentReader):
    """Environment backed by a dict."""

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values = dict(values or {})

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value


class MockFileSystem(FileSystemReader):
    """Filesystem backed by a ``{path: content}`` dict.

    Paths in ``unreadable`` exist but fail to read with OSError.
    """

    def __init__(
        self,
        files: Mapping[str, str] | None = None,
        unreadable: Iterable[str] = (),
    ):
        self._files = dict(files or {})
        self._unreadable = set(unreadable)
        self._probed: list[str] = []

    @property
    def probed(self) -> list[str]:
        """Every path passed to is_file / file_size, in order."""
        return self._probed

    def add_file(self, path: str, content: str = "") -> None:
        self._files[path] = content

    def is_file(self, path: str) -> bool:
        self._probed.append(path)
        return path in self._files

    def file_size(self, path: str) -> int:
        self._probed.append(path)
        return len(self._files.get(path, "").encode("utf-8"))

    def read_lines(self, path: str) -> list[str]:
        if path in self._unreadable:
            raise PermissionError(f"Permission denied: '{path}'")
        if path not in self._files:
            raise FileNotFoundError(f"No such file: '{path}'")
        return self._files[path].splitlines()


class MockProcessRunner(ProcessRunner):
    """Returns scripted exit codes, one per call.

    After the script runs out, the last exit code repeats. An empty
    script means every run succeeds.
    """

    def __init__(self, exit_codes: Iterable[int] = ()):
        self._exit_codes = list(exit_codes)
        self._call_log: list[tuple[str, list[str]]] = []

    @property
    def call_log(self) -> list[tuple[str, list[str]]]:
        """All (executable, args) pairs this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def run(self, executable: str, args: list[str]) -> int:
        self._call_log.append((executable, list(args)))
        if not self._exit_codes:
            return 0
        index = min(len(self._call_log), len(self._exit_codes)) - 1
        return self._exit_codes[index]


class MockDownloader(Downloader):
    """Pretends to download by writing ``content`` into a MockFileSystem.

    With ``fail=True`` every download reports a transport error.
    """

    def __init__(
        self,
        fs: MockFileSystem | None = None,
        content: str = "MZ-fake-nuget",
        fail: bool = False,
    ):
        self._fs = fs
        self._content = content
        self._fail = fail
        self._call_log: list[tuple[str, str]] = []

    @property
    def call_log(self) -> list[tuple[str, str]]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def download(self, url: str, dest: str) -> DownloadResult:
        self._call_log.append((url, dest))
        if self._fail:
            return DownloadResult(ok=False, url=url, dest=dest, error="Download failed: [mock] unreachable")
        if self._fs is not None:
            self._fs.add_file(dest, self._content)
        return DownloadResult(ok=True, url=url, dest=dest, size_bytes=len(self._content))
