"""
Build environment — tool locations published by the TeamCity agent.

TeamCity hands a build two properties files. The *build* properties
file is named by the ``TEAMCITY_BUILD_PROPERTIES_FILE`` environment
variable; one of its keys names the *configuration* properties file,
which is where agent tools such as the NuGet command line are listed.

Running outside TeamCity is normal (local builds, other CI), so every
missing link in that chain degrades to an empty mapping plus a build
warning instead of an error.
"""

from __future__ import annotations

import logging

from src.adapters.base import EnvironmentReader, FileSystemReader
from src.core.config.properties import read_properties_file
from src.core.observability.build_log import BuildLog

logger = logging.getLogger(__name__)

BUILD_PROPERTIES_ENV_VAR = "TEAMCITY_BUILD_PROPERTIES_FILE"
CONFIG_PROPERTIES_KEY = "teamcity.configuration.properties.file"


def _read_or_warn(
    path: str,
    fs: FileSystemReader,
    build_log: BuildLog,
    label: str,
) -> dict[str, str] | None:
    if not fs.is_file(path):
        build_log.warning(f"Couldn't find Teamcity {label} properties file: '{path}'")
        return None

    build_log.message(f"Reading Teamcity {label} properties file: '{path}'")
    try:
        return read_properties_file(path, fs)
    except OSError as e:
        logger.debug("Read of %s failed", path, exc_info=True)
        build_log.warning(f"Couldn't read Teamcity {label} properties file: '{path}': {e}")
        return None


def resolve_tool_locations(
    env: EnvironmentReader,
    fs: FileSystemReader,
    build_log: BuildLog,
) -> dict[str, str]:
    """Return the configuration properties, or ``{}`` if unavailable.

    The build properties file is consulted only to locate the
    configuration properties file; its own values are not returned.
    """
    build_props_path = env.get(BUILD_PROPERTIES_ENV_VAR)
    if not build_props_path:
        build_log.warning("Couldn't find Teamcity build properties file.")
        return {}

    build_values = _read_or_warn(build_props_path, fs, build_log, "build")
    if build_values is None:
        return {}

    config_props_path = build_values.get(CONFIG_PROPERTIES_KEY)
    if not config_props_path:
        build_log.warning("Couldn't find Teamcity config properties file.")
        return {}

    config_values = _read_or_warn(config_props_path, fs, build_log, "config")
    if config_values is None:
        return {}

    logger.info("Loaded %d Teamcity config properties", len(config_values))
    return config_values
