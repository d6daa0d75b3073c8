"""
Build log — TeamCity service messages on stdout.

This is the machine-readable channel: the build server scans captured
console output for ``##teamcity[...]`` lines and turns them into
collapsible blocks, build problems and statistics. Everything else
written here is a plain line shown as-is in the build log.

Formatting and emission are kept apart: ``format_service_message``
builds the exact text, ``BuildLog`` decides where it goes and whether
it gets a terminal colour. Diagnostics meant for humans debugging the
tool go through ``logging`` instead (see logging_config.py).

Line forms:
    ##teamcity[blockOpened name='<name>']
    ##teamcity[blockClosed name='<name>']
    ##teamcity[message text='<text>' status='WARNING']
    ##teamcity[message text='<text>' status='ERROR']
    ##teamcity[buildStatisticValue key='<key>' value='<int>']
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import click

# ── Escaping ────────────────────────────────────────────────────

# TeamCity uses '|' as the escape character inside attribute values.
_ESCAPES = (
    ("|", "||"),
    ("'", "|'"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("[", "|["),
    ("]", "|]"),
)


def escape_value(value: str) -> str:
    """Escape a service-message attribute value."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def format_service_message(name: str, /, **attrs: object) -> str:
    """Build a ``##teamcity[name key='value' ...]`` line.

    Attributes keep their keyword order.
    """
    parts = [name]
    parts.extend(f"{key}='{escape_value(str(val))}'" for key, val in attrs.items())
    return f"##teamcity[{' '.join(parts)}]"


# ── Emission ────────────────────────────────────────────────────

_COLORS = {
    "section": "cyan",
    "warning": "yellow",
    "error": "red",
    "statistic": "magenta",
    "success": "green",
}


class BuildLog:
    """Writes plain and structured build-log lines.

    Args:
        echo: Line sink. Defaults to ``click.echo`` (stdout). Tests pass
            ``list.append`` to capture lines.
        color: Wrap structured lines in ANSI colours. Ignored by sinks
            that don't render them; turn off to get bare text.
    """

    def __init__(
        self,
        echo: Callable[[str], object] | None = None,
        color: bool = True,
    ) -> None:
        self._echo = echo or click.echo
        self._color = color

    def _emit(self, line: str, kind: str | None = None) -> None:
        if self._color and kind is not None:
            line = click.style(line, fg=_COLORS[kind])
        self._echo(line)

    def message(self, text: str) -> None:
        self._emit(text)

    def success(self, text: str) -> None:
        self._emit(text, "success")

    def block_opened(self, name: str) -> None:
        self._emit(format_service_message("blockOpened", name=name), "section")

    def block_closed(self, name: str) -> None:
        self._emit(format_service_message("blockClosed", name=name), "section")

    def warning(self, text: str) -> None:
        self._emit(
            format_service_message("message", text=text, status="WARNING"),
            "warning",
        )

    def error(self, text: str) -> None:
        self._emit(
            format_service_message("message", text=text, status="ERROR"),
            "error",
        )

    def statistic(self, key: str, value: int) -> None:
        self._emit(
            format_service_message("buildStatisticValue", key=key, value=int(value)),
            "statistic",
        )

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Bound a unit of work with blockOpened / blockClosed."""
        self.block_opened(name)
        try:
            yield
        finally:
            self.block_closed(name)
