"""Data models for command-line arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class RunMode(StrEnum):
    """What the process does once the engine is loaded."""

    INTERACTIVE = "interactive"
    RETRIEVE = "retrieve"
    COUNT = "count"


@dataclass(frozen=True)
class RunConfig:
    """Structured run configuration produced by ``parse_args``.

    Attributes:
        mode: Resolved mode. Retrieve wins over count when both flags appear.
        queries: Individual queries split from ``raw_query``.
        tuning_parameter: Value of the weighting model's ``c`` control.
        property_overrides: ``-D`` properties, last value wins.
        verbose: Whether the interactive prompt is shown.
        retrieving: ``-r`` / ``--retrieve`` was given.
        counting: ``-C`` / ``--count`` was given.
        quiet_logging: ``--nonverbose`` was given (error-level logging only).
        raw_query: The captured query text before splitting.
    """

    mode: RunMode = RunMode.INTERACTIVE
    queries: tuple[str, ...] = ()
    tuning_parameter: float = 1.0
    property_overrides: dict[str, str] = field(default_factory=dict)
    verbose: bool = True
    retrieving: bool = False
    counting: bool = False
    quiet_logging: bool = False
    raw_query: str = ""
