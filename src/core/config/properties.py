"""
Properties reader — ``key=value`` files written by the build server.

One pair per line, split at the first ``=``. Keys are taken verbatim;
values carry backslash escapes that are resolved the way a regex
literal is unescaped (``\\n``, ``\\t``, ``\\\\``, ``\\:``, ``\\uXXXX``...).
Lines without ``=`` are skipped. The reader never fails: a sequence it
cannot make sense of is kept as close to the input as possible.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from src.adapters.base import FileSystemReader

logger = logging.getLogger(__name__)

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "v": "\v",
    "f": "\f",
    "r": "\r",
    "e": "\x1b",
}

# Longest forms first; the final "." catches every single-char escape.
_ESCAPE_RE = re.compile(
    r"\\(u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|[0-7]{1,3}|c[A-Za-z]|.)",
    re.DOTALL,
)


def _replace_escape(match: re.Match[str]) -> str:
    seq = match.group(1)
    head = seq[0]

    if len(seq) > 1:
        if head in "ux":
            return chr(int(seq[1:], 16))
        if head == "c":
            return chr(ord(seq[1].upper()) - 64)
    if head in "01234567":
        return chr(int(seq, 8) & 0xFF)
    # \c, \u or \x that didn't match a full sequence: drop the backslash
    return _SIMPLE_ESCAPES.get(head, head)


def unescape(value: str) -> str:
    """Resolve backslash escapes in a property value.

    A trailing lone backslash has nothing to escape and is kept.
    """
    return _ESCAPE_RE.sub(_replace_escape, value)


def parse_properties(lines: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` lines into a mapping.

    Later occurrences of a key overwrite earlier ones.
    """
    values: dict[str, str] = {}
    for line in lines:
        key, sep, raw = line.partition("=")
        if not sep:
            continue
        values[key] = unescape(raw)
    return values


def read_properties_file(path: str, fs: FileSystemReader) -> dict[str, str]:
    """Read and parse a properties file.

    Raises:
        OSError: If the file cannot be read.
    """
    values = parse_properties(fs.read_lines(path))
    logger.debug("Parsed %d properties from %s", len(values), path)
    return values
