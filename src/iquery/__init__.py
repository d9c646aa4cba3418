"""Interactive querying front end for a pluggable retrieval engine."""

__version__ = "0.1.0"
