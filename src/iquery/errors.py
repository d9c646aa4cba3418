"""Exception taxonomy for the querying front end."""

from __future__ import annotations


class IQueryError(Exception):
    """Base exception for querying errors."""


class ArgumentError(IQueryError):
    """Malformed command-line input. Logged, never fatal."""


class EngineLoadFailure(IQueryError):
    """The retrieval engine or its index could not be initialised."""


class PipelineError(IQueryError):
    """A pipeline stage failed inside the engine."""


class NoResultsAvailable(PipelineError):
    """Matching found no posting data for the query.

    This is a legitimate zero-match outcome, not a system fault.
    """


class CountUnavailable(IQueryError):
    """An exact count was requested before a result set was produced."""


class FormattingIOError(IQueryError):
    """Writing results to the output sink failed."""


class IndexCloseError(IQueryError):
    """Releasing the engine handle failed."""
