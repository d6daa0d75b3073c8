"""Adapters — capability bindings for the machine the restore runs on.

Public re-exports for convenient access.
"""

from src.adapters.base import (
    Downloader,
    DownloadResult,
    EnvironmentReader,
    FileSystemReader,
    ProcessRunner,
)

__all__ = [
    "DownloadResult",
    "Downloader",
    "EnvironmentReader",
    "FileSystemReader",
    "ProcessRunner",
]
