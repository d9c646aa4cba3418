"""Run one query through the engine, then display or count it."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from iquery.config import Settings
from iquery.engine.base import QueryEngine
from iquery.engine.schemas import QueryContext, RankedResultSet
from iquery.errors import (
    CountUnavailable,
    EngineLoadFailure,
    FormattingIOError,
    NoResultsAvailable,
    PipelineError,
)
from iquery.pipeline.formatter import print_results

logger = logging.getLogger(__name__)


class PipelineDriver:
    """Orchestrates context → four pipeline stages → formatting or counting."""

    def __init__(
        self,
        engine: QueryEngine,
        settings: Settings | None = None,
        sink: TextIO | None = None,
    ):
        self.engine = engine
        self.settings = settings or Settings()
        self.sink = sink if sink is not None else sys.stdout
        self.matching_count = 0

    def _prepare(self, query_id: str, query: str, c: float) -> QueryContext:
        querying = self.settings.querying
        ctx = self.engine.new_query_context(query_id, query)
        self.engine.set_tuning_control(ctx, "c", c)
        if querying.start is not None:
            self.engine.set_tuning_control(ctx, "start", querying.start)
        if querying.end is not None:
            self.engine.set_tuning_control(ctx, "end", querying.end)
        self.engine.add_model_pair(ctx, querying.matching_model, querying.weighting_model)
        self.matching_count += 1
        return ctx

    def process_query(self, query_id: str, query: str, c: float = 1.0) -> None:
        """Retrieve and display results for one query.

        Engine and output failures are logged; they never stop later queries.
        """
        ctx = self._prepare(query_id, query, c)
        try:
            result_set = self.engine.run_pipeline(ctx)
        except NoResultsAvailable as exc:
            logger.debug("No results for query %s: %s", query_id, exc)
            result_set = RankedResultSet()
        except PipelineError:
            logger.exception("Problem running query %s", query_id)
            return

        output = self.settings.output
        try:
            print_results(
                self.sink,
                result_set,
                meta_keys=output.meta_keys,
                max_rows=output.max_rows,
                lookup=self.engine.get_metadata,
            )
        except FormattingIOError:
            logger.exception("Problem displaying results")
        except (PipelineError, LookupError):
            logger.exception("Problem resolving metadata for query %s", query_id)

    def count_query(self, query_id: str, query: str, c: float = 1.0) -> int | None:
        """Count matching documents for one query and print the total.

        The retrieved set size is raised to the collection size while the
        query runs, so the exact count is never capped.

        Returns:
            The count written, or ``None`` if the query could not run.
        """
        try:
            num_docs = self.engine.count_documents()
        except EngineLoadFailure:
            logger.exception("Problem reading collection statistics")
            return None

        ctx = self._prepare(query_id, query, c)
        previous = self.engine.retrieved_set_size
        self.engine.retrieved_set_size = num_docs
        try:
            try:
                self.engine.run_pipeline(ctx)
                count = self.engine.get_exact_result_count(ctx)
            except (NoResultsAvailable, CountUnavailable):
                count = 0
        except PipelineError:
            logger.exception("Problem running query %s", query_id)
            return None
        finally:
            self.engine.retrieved_set_size = previous

        try:
            self.sink.write(f"\nOUTPUT - {count} matching documents\n\n")
            self.sink.flush()
        except OSError:
            logger.exception("Problem displaying count")
        return count
