"""Abstract base class for query engines."""

from __future__ import annotations

from abc import ABC, abstractmethod

from iquery.engine.schemas import QueryContext, RankedResultSet
from iquery.errors import CountUnavailable, NoResultsAvailable


class QueryEngine(ABC):
    """Interface for retrieval engines driven by the querying front end.

    A query runs through four stages in fixed order: preprocessing,
    matching, postprocessing, post-filtering.
    """

    # ------------------------------------------------------------------
    # Query context
    # ------------------------------------------------------------------

    def new_query_context(self, query_id: str, text: str) -> QueryContext:
        """Create a context for a query. Never validates the engine."""
        return QueryContext(query_id=query_id, raw_text=text)

    def set_tuning_control(self, ctx: QueryContext, name: str, value: float | str) -> None:
        """Attach a named control, e.g. the weighting model's ``c``."""
        ctx.controls[name] = str(value)

    def add_model_pair(self, ctx: QueryContext, matching_model: str, weighting_model: str) -> None:
        """Declare the matching and weighting models for a query."""
        ctx.matching_model_name = matching_model
        ctx.weighting_model_name = weighting_model

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    @abstractmethod
    def run_preprocessing(self, ctx: QueryContext) -> None:
        """Turn the raw query text into weighted query terms."""

    @abstractmethod
    def run_matching(self, ctx: QueryContext) -> None:
        """Score candidate documents and set ``ctx.result_set``.

        Raises:
            NoResultsAvailable: if no posting data exists for the query.
            PipelineError: for any other engine failure.
        """

    @abstractmethod
    def run_postprocessing(self, ctx: QueryContext) -> None:
        """Transform the result set after matching."""

    @abstractmethod
    def run_postfilters(self, ctx: QueryContext) -> None:
        """Filter or decorate the final result set."""

    def run_pipeline(self, ctx: QueryContext) -> RankedResultSet:
        """Run the four stages in order and return the result set.

        Raises:
            NoResultsAvailable: if matching produced nothing to rank.
            PipelineError: for any other engine failure.
        """
        self.run_preprocessing(ctx)
        self.run_matching(ctx)
        self.run_postprocessing(ctx)
        self.run_postfilters(ctx)
        if ctx.result_set is None:
            raise NoResultsAvailable(f"Query {ctx.query_id} produced no result set")
        return ctx.result_set

    def get_exact_result_count(self, ctx: QueryContext) -> int:
        """Return the number of matching documents before cropping.

        Raises:
            CountUnavailable: if the pipeline never produced a result set.
        """
        if ctx.result_set is None:
            raise CountUnavailable(f"No result set for query {ctx.query_id}")
        return ctx.result_set.exact_size

    # ------------------------------------------------------------------
    # Index access
    # ------------------------------------------------------------------

    @abstractmethod
    def get_metadata(self, key: str, doc_ids: list[int]) -> list[str]:
        """Look up a metadata value for each document, in order."""

    @abstractmethod
    def count_documents(self) -> int:
        """Read the collection size through a fresh statistics-only handle."""

    @property
    @abstractmethod
    def retrieved_set_size(self) -> int:
        """Maximum number of documents kept by matching."""

    @retrieved_set_size.setter
    @abstractmethod
    def retrieved_set_size(self, value: int) -> None: ...

    @abstractmethod
    def close(self) -> None:
        """Release the engine.

        Raises:
            IndexCloseError: if releasing the underlying index fails.
        """

    @classmethod
    def engine_name(cls) -> str:
        """Return human-readable engine name."""
        return cls.__name__
