"""
Download adapter — fetch a file over HTTP(S).

Plain ``urllib.request``: one unauthenticated GET, streamed to disk in
chunks. A failed or interrupted transfer never leaves a partial file
behind.
"""

from __future__ import annotations

import logging
import urllib.request
from pathlib import Path

from src.adapters.base import Downloader, DownloadResult

logger = logging.getLogger(__name__)

_USER_AGENT = "robust-nuget-restore/1.0"
_CHUNK_SIZE = 8192


def _fmt_size(size: int) -> str:
    """Human-readable byte size."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class UrlDownloader(Downloader):
    """Download with ``urllib``. No retries, no resume.

    Args:
        timeout: Socket timeout in seconds, or None to wait forever.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    def download(self, url: str, dest: str) -> DownloadResult:
        target = Path(dest)
        logger.info("Downloading %s -> %s", url, target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                downloaded = 0
                with open(target, "wb") as f:
                    while True:
                        chunk = resp.read(_CHUNK_SIZE)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
        except Exception as e:
            target.unlink(missing_ok=True)
            logger.warning("Download of %s failed: %s", url, e)
            return DownloadResult(ok=False, url=url, dest=dest, error=f"Download failed: {e}")

        logger.info("Downloaded %s to %s", _fmt_size(downloaded), target)
        return DownloadResult(ok=True, url=url, dest=dest, size_bytes=downloaded)
