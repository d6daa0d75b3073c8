"""
Local environment and filesystem adapters.

Thin wrappers over ``os.environ`` and ``pathlib`` so the core can be
driven against an in-memory double in tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from src.adapters.base import EnvironmentReader, FileSystemReader

logger = logging.getLogger(__name__)


class OsEnvironment(EnvironmentReader):
    """Reads the live process environment.

    ``environ`` replaces ``os.environ``; tests pass a plain dict.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ if environ is not None else os.environ

    def get(self, name: str) -> str | None:
        return self._environ.get(name)


class LocalFileSystem(FileSystemReader):
    """Queries the real filesystem.

    Relative paths resolve against the process working directory.
    Tests pass ``base_dir`` (usually ``tmp_path``) to anchor them
    elsewhere.
    """

    def __init__(self, base_dir: Path | None = None):
        self._base_dir = base_dir

    def _resolve(self, path: str) -> Path:
        target = Path(path)
        if self._base_dir is not None and not target.is_absolute():
            target = self._base_dir / target
        return target

    def is_file(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except OSError:
            return False

    def file_size(self, path: str) -> int:
        target = self._resolve(path)
        try:
            return target.stat().st_size if target.is_file() else 0
        except OSError as e:
            logger.debug("Cannot stat %s: %s", target, e)
            return 0

    def read_lines(self, path: str) -> list[str]:
        target = self._resolve(path)
        logger.debug("Reading %s", target)
        # Non-ASCII in TeamCity properties arrives as \uXXXX escapes
        return target.read_text(encoding="utf-8", errors="replace").splitlines()
