"""
Robust NuGet Restore — CLI entrypoint.

Usage:
    robust-restore [OPTIONS] [SOLUTION_FILE] [MAX_RETRIES] [SOURCES]
    python -m src.main MySolution.sln 10 https://api.nuget.org/v3/index.json

Options go before the positional arguments. Anything after a literal
``--`` is ignored.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Sequence
from typing import NoReturn

import click

from src import __version__
from src.core.models.restore import DEFAULT_MAX_RETRIES, RestoreRequest
from src.core.observability.logging_config import resolve_level, setup_logging

logger = logging.getLogger(__name__)

PROG_NAME = "robust-restore"
USAGE = f"Usage: {PROG_NAME} [solutionfile] [maxretries] [source1,source2,...]"
PASSTHROUGH_MARKER = "--"

_INTEGER_RE = re.compile(r"[+-]?\d+")


class UsageError(Exception):
    """Raised when positional arguments don't fit the CLI grammar."""


def strip_passthrough(argv: Sequence[str]) -> list[str]:
    """Drop the first ``--`` and everything after it."""
    args: list[str] = []
    for arg in argv:
        if arg == PASSTHROUGH_MARKER:
            break
        args.append(arg)
    return args


def parse_request(args: Sequence[str]) -> RestoreRequest:
    """Turn 0-3 positional arguments into a RestoreRequest.

    Raises:
        UsageError: Too many arguments, or MAX_RETRIES is not an
            integer >= 1.
    """
    if len(args) > 3:
        raise UsageError(f"Expected at most 3 arguments, got {len(args)}")

    solution_file = args[0] if len(args) > 0 else None

    max_retries = DEFAULT_MAX_RETRIES
    if len(args) > 1:
        raw = args[1].strip()
        if not _INTEGER_RE.fullmatch(raw):
            raise UsageError(f"maxretries must be an integer, got '{args[1]}'")
        max_retries = int(raw)
        if max_retries < 1:
            raise UsageError(f"maxretries must be at least 1, got {max_retries}")

    sources = None
    if len(args) > 2:
        sources = tuple(s for s in args[2].split(",") if s) or None

    return RestoreRequest(
        solution_file=solution_file,
        max_retries=max_retries,
        sources=sources,
    )


def _usage_exit(reason: str) -> NoReturn:
    click.secho(f"❌ {reason}", fg="red")
    click.echo(USAGE)
    sys.exit(1)


@click.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        # Options come first; from the first positional on, everything
        # (including "-2") is an argument.
        "allow_interspersed_args": False,
        "ignore_unknown_options": True,
    }
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose diagnostics on stderr.")
@click.option("--quiet", "-q", is_flag=True, help="Only log diagnostic errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option("--no-color", is_flag=True, help="Write build-log lines without ANSI colours.")
@click.argument("args", nargs=-1, metavar="[SOLUTION_FILE] [MAX_RETRIES] [SOURCES]")
def cli(
    verbose: bool,
    quiet: bool,
    debug: bool,
    no_color: bool,
    args: tuple[str, ...],
) -> None:
    """Robust NuGet Restore — restore packages with retries.

    Locates nuget.exe (TeamCity tool cache, PATH, or a local copy
    downloaded on demand) and runs `nuget restore` up to MAX_RETRIES
    times (default 100), pausing 5 seconds between failed attempts.

    SOURCES is a comma-separated list of package sources.
    """
    from src.core.observability.build_log import BuildLog
    from src.core.use_cases.restore import run_restore

    setup_logging(
        level=resolve_level(
            verbose=verbose,
            quiet=quiet,
            debug=debug,
            env_level=os.environ.get("RNR_LOG_LEVEL"),
        ),
        log_file=os.environ.get("RNR_LOG_FILE"),
        log_file_level=os.environ.get("RNR_LOG_FILE_LEVEL"),
    )

    try:
        request = parse_request(args)
    except UsageError as e:
        _usage_exit(str(e))

    logger.info("Restore request: %s", request.model_dump())
    result = run_restore(request, build_log=BuildLog(color=not no_color))
    logger.info("Restore result: %s", result.to_dict())
    sys.exit(result.exit_code)


def main(argv: Sequence[str] | None = None) -> None:
    """Console-script entry: strip passthrough arguments, then run the CLI."""
    args = strip_passthrough(sys.argv[1:] if argv is None else argv)
    try:
        rv = cli.main(args=args, prog_name=PROG_NAME, standalone_mode=False)
    except click.UsageError as e:
        _usage_exit(e.format_message())
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(rv or 0)


if __name__ == "__main__":
    main()
