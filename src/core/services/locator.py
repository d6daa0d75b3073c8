"""
Binary locator — find ``nuget.exe`` before anything is restored.

Discovery is an ordered list of strategies. Each one is a plain
function taking a LocatorContext and returning a LocatedBinary or
``None``; the first hit wins and later strategies never run:

    1. from_tool_cache               TeamCity agent tool (NuGet.CommandLine)
    2. from_path                     a PATH directory holding nuget.exe
    3. from_local_cache_or_download  ./nuget.exe, fetched once if missing

All machine access goes through the capabilities in the context, so
tests drive the whole chain with in-memory doubles.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from src.adapters.base import Downloader, EnvironmentReader, FileSystemReader
from src.core.config.build_environment import resolve_tool_locations
from src.core.models.restore import NUGET_EXE, BinarySource, LocatedBinary
from src.core.observability.build_log import BuildLog

logger = logging.getLogger(__name__)

TOOL_CACHE_KEY = "teamcity.tool.NuGet.CommandLine.DEFAULT"
NUGET_DOWNLOAD_URL = "https://dist.nuget.org/win-x86-commandline/latest/nuget.exe"
PATH_ENV_VAR = "PATH"


@dataclass
class LocatorContext:
    """Capabilities and settings shared by every strategy."""

    env: EnvironmentReader
    fs: FileSystemReader
    downloader: Downloader
    build_log: BuildLog
    cache_path: str = NUGET_EXE
    download_url: str = NUGET_DOWNLOAD_URL
    path_separator: str = os.pathsep


Strategy = Callable[[LocatorContext], LocatedBinary | None]


# ── Strategies ──────────────────────────────────────────────────


def from_tool_cache(ctx: LocatorContext) -> LocatedBinary | None:
    """The NuGet command line installed by the TeamCity agent."""
    tools = resolve_tool_locations(ctx.env, ctx.fs, ctx.build_log)
    tool_dir = tools.get(TOOL_CACHE_KEY)
    if not tool_dir:
        logger.debug("No %s in Teamcity config properties", TOOL_CACHE_KEY)
        return None

    candidate = os.path.join(tool_dir, "tools", NUGET_EXE)
    if not ctx.fs.is_file(candidate):
        logger.info("Tool cache entry points at missing file %s", candidate)
        return None
    return LocatedBinary(location=candidate, source=BinarySource.TOOL_CACHE)


def from_path(ctx: LocatorContext) -> LocatedBinary | None:
    """First PATH directory that contains nuget.exe."""
    raw = ctx.env.get(PATH_ENV_VAR)
    if not raw:
        ctx.build_log.warning(f"Couldn't find {PATH_ENV_VAR} environment variable.")
        return None

    for directory in (d for d in raw.split(ctx.path_separator) if d):
        if ctx.fs.is_file(os.path.join(directory, NUGET_EXE)):
            return LocatedBinary(location=directory, source=BinarySource.PATH)

    logger.debug("%s not found in any %s directory", NUGET_EXE, PATH_ENV_VAR)
    return None


def from_local_cache_or_download(ctx: LocatorContext) -> LocatedBinary | None:
    """Reuse a previously downloaded nuget.exe, or fetch the latest one."""
    if ctx.fs.file_size(ctx.cache_path) > 0:
        return LocatedBinary(location=ctx.cache_path, source=BinarySource.LOCAL_CACHE)

    ctx.build_log.message(f"Downloading nuget: '{ctx.download_url}'")
    result = ctx.downloader.download(ctx.download_url, ctx.cache_path)
    if not result.ok:
        ctx.build_log.message(f"Couldn't download nuget: {result.error}")
        return None

    if ctx.fs.file_size(ctx.cache_path) <= 0:
        ctx.build_log.message(f"Downloaded nuget is empty: '{ctx.cache_path}'")
        return None

    return LocatedBinary(location=ctx.cache_path, source=BinarySource.DOWNLOAD)


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    from_tool_cache,
    from_path,
    from_local_cache_or_download,
)


# ── Entry point ─────────────────────────────────────────────────


def locate_binary(
    ctx: LocatorContext,
    strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
) -> LocatedBinary | None:
    """Try each strategy in order and return the first result.

    Returns:
        The located binary, or None when every strategy came up empty.
    """
    for strategy in strategies:
        label = getattr(strategy, "__name__", repr(strategy))
        binary = strategy(ctx)
        if binary is not None:
            logger.info("Located %s via %s", binary.executable, label)
            ctx.build_log.message(f"Using nuget: '{binary.executable}'")
            return binary
        logger.debug("Strategy %s found nothing", label)

    return None
