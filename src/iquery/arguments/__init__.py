"""Command-line argument parsing."""

from iquery.arguments.parser import parse_args, split_queries
from iquery.arguments.schemas import RunConfig, RunMode

__all__ = ["RunConfig", "RunMode", "parse_args", "split_queries"]
