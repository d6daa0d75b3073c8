"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from src.adapters.mock import MockDownloader, MockEnvironment, MockFileSystem
from src.core.observability.build_log import BuildLog
from src.core.services.locator import LocatorContext


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def lines() -> list[str]:
    """Captured build-log lines."""
    return []


@pytest.fixture
def build_log(lines: list[str]) -> BuildLog:
    """Colourless build log writing into ``lines``."""
    return BuildLog(echo=lines.append, color=False)


@pytest.fixture
def env() -> MockEnvironment:
    return MockEnvironment()


@pytest.fixture
def fs() -> MockFileSystem:
    return MockFileSystem()


@pytest.fixture
def downloader(fs: MockFileSystem) -> MockDownloader:
    return MockDownloader(fs=fs)


@pytest.fixture
def locator_ctx(
    env: MockEnvironment,
    fs: MockFileSystem,
    downloader: MockDownloader,
    build_log: BuildLog,
) -> LocatorContext:
    """Locator context over in-memory doubles, ':' as PATH separator."""
    return LocatorContext(
        env=env,
        fs=fs,
        downloader=downloader,
        build_log=build_log,
        path_separator=":",
    )


def _make_teamcity(
    env: MockEnvironment,
    fs: MockFileSystem,
    config: str,
    build_path: str = "/tc/build.properties",
    config_path: str = "/tc/config.properties",
) -> None:
    """Wire up a TeamCity build -> config properties chain."""
    env.set("TEAMCITY_BUILD_PROPERTIES_FILE", build_path)
    fs.add_file(
        build_path,
        f"teamcity.build.id=42\nteamcity.configuration.properties.file={config_path}\n",
    )
    fs.add_file(config_path, config)


@pytest.fixture
def make_teamcity():
    """Helper: ``make_teamcity(env, fs, config_text)``."""
    return _make_teamcity
