"""Command-line argument state machine.

Tokens are consumed left to right by a cursor::

    -D<key>[=<value>]          property override
    -r | --retrieve <words..>  retrieve the comma-separated queries
    -C | --count <words..>     count matches for the comma-separated queries
    -c<value> | -c <value>     tuning parameter
    --nonverbose               no prompt, error-level logging
    --noverbose                (sole argument) interactive without prompt

Malformed input is logged and skipped; parsing never fails.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from iquery.arguments.schemas import RunConfig, RunMode
from iquery.errors import ArgumentError

logger = logging.getLogger(__name__)

_QUERY_SEGMENT = re.compile(r"[^,]+")


class _Cursor:
    """Read position over the argument vector."""

    def __init__(self, args: Sequence[str]):
        self.args = args
        self.pos = 0

    def __bool__(self) -> bool:
        return self.pos < len(self.args)

    @property
    def current(self) -> str:
        return self.args[self.pos]

    def peek(self) -> str | None:
        nxt = self.pos + 1
        return self.args[nxt] if nxt < len(self.args) else None

    def advance(self) -> None:
        self.pos += 1


def split_queries(raw_query: str) -> list[str]:
    """Split a comma-separated blob into trimmed, non-empty queries."""
    queries = (m.group().strip() for m in _QUERY_SEGMENT.finditer(raw_query))
    return [q for q in queries if q]


def parse_property(token: str) -> tuple[str, str]:
    """Parse ``-Dkey=value`` (or ``-Dkey``) into a key/value pair."""
    key, _, value = token[2:].partition("=")
    if not key:
        raise ArgumentError(f"Empty property name in {token!r}")
    return key, value


def _capture_query(cursor: _Cursor) -> str:
    """Consume tokens up to the next flag and return them space-joined."""
    words: list[str] = []
    while cursor and not cursor.current.startswith("-"):
        words.append(cursor.current)
        cursor.advance()
    return " ".join(words)


def _parse_tuning(cursor: _Cursor) -> float:
    """Read the ``-c`` value, consuming a separate token only if it is numeric."""
    token = cursor.current
    if len(token) > 2:
        value = token[2:]
    else:
        value = cursor.peek()
        if value is None:
            raise ArgumentError("c value can't be parsed: no value after -c")
    try:
        c = float(value)
    except ValueError as exc:
        raise ArgumentError(f"c value can't be parsed: {value!r}") from exc
    if len(token) == 2:
        cursor.advance()
    return c


def parse_args(argv: Sequence[str]) -> RunConfig:
    """Turn raw command-line tokens into a ``RunConfig``.

    Args:
        argv: Arguments without the program name.

    Returns:
        The run configuration. Errors are logged, never raised.
    """
    if not argv:
        return RunConfig()
    if list(argv) == ["--noverbose"]:
        return RunConfig(verbose=False)

    overrides: dict[str, str] = {}
    raw_query = ""
    c = 1.0
    verbose = True
    quiet = False
    retrieving = False
    counting = False

    cursor = _Cursor(argv)
    while cursor:
        token = cursor.current
        try:
            if token.startswith("-D"):
                key, value = parse_property(token)
                overrides[key] = value
            elif token in ("-r", "--retrieve", "-C", "--count"):
                cursor.advance()
                raw_query = _capture_query(cursor)
                if token in ("-r", "--retrieve"):
                    retrieving = True
                else:
                    counting = True
                if not raw_query:
                    logger.error("No query after %s", token)
                # cursor already sits on the next flag
                continue
            elif token == "--nonverbose":
                verbose = False
                quiet = True
            elif token.startswith("-c"):
                c = _parse_tuning(cursor)
        except ArgumentError as exc:
            logger.error("%s", exc)
        cursor.advance()

    if retrieving:
        mode = RunMode.RETRIEVE
    elif counting:
        mode = RunMode.COUNT
    else:
        mode = RunMode.INTERACTIVE

    return RunConfig(
        mode=mode,
        queries=tuple(split_queries(raw_query)),
        tuning_parameter=c,
        property_overrides=overrides,
        verbose=verbose,
        retrieving=retrieving,
        counting=counting,
        quiet_logging=quiet,
        raw_query=raw_query,
    )
