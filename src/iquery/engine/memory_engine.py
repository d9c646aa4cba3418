"""In-memory query engine — loads a JSON-Lines corpus at startup.

Suitable for small collections and for exercising the querying front end
without an external retrieval service.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from iquery.engine.base import QueryEngine
from iquery.engine.index import InvertedIndex, read_statistics, tokenize
from iquery.engine.schemas import QueryContext, RankedResultSet
from iquery.engine.weighting import get_weighting_model
from iquery.errors import IndexCloseError, NoResultsAvailable, PipelineError

logger = logging.getLogger(__name__)

# Matching model name -> whether every query term must occur
_MATCHING_MODELS: dict[str, bool] = {
    "Matching": False,
    "AndMatching": True,
}


class MemoryEngine(QueryEngine):
    """Query engine over an ``InvertedIndex`` held in process memory."""

    def __init__(
        self,
        index_path: str | Path = "local_data/collection.jsonl",
        retrieved_set_size: int = 1000,
        embedded_meta_keys: Iterable[str] = (),
        stopwords: Iterable[str] = (),
    ):
        self._index_path = Path(index_path)
        self._retrieved_set_size = retrieved_set_size
        self._embedded_meta_keys = list(embedded_meta_keys)
        self._stopwords = {w.lower() for w in stopwords}

        start = time.perf_counter()
        self._index: InvertedIndex | None = InvertedIndex.load(self._index_path)
        logger.info("time to initialise index : %.3f", time.perf_counter() - start)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def run_preprocessing(self, ctx: QueryContext) -> None:
        tokens = [t for t in tokenize(ctx.raw_text) if t not in self._stopwords]
        ctx.terms = dict(Counter(tokens))

    def run_matching(self, ctx: QueryContext) -> None:
        index = self._require_index()
        if not ctx.terms:
            raise NoResultsAvailable(f"Query {ctx.query_id} has no terms")

        try:
            conjunctive = _MATCHING_MODELS[ctx.matching_model_name.rsplit(".", 1)[-1]]
        except KeyError:
            raise PipelineError(
                f"Unknown matching model '{ctx.matching_model_name}'. "
                f"Available: {sorted(_MATCHING_MODELS)}"
            ) from None
        try:
            c = ctx.tuning_parameter
        except ValueError as exc:
            raise PipelineError(f"Invalid c control: {ctx.controls.get('c')!r}") from exc
        model = get_weighting_model(ctx.weighting_model_name, c)

        stats = index.statistics
        scores = np.zeros(stats.number_of_documents, dtype=np.float64)
        hits = np.zeros(stats.number_of_documents, dtype=np.int64)
        found = 0
        for term, key_frequency in ctx.terms.items():
            postings = index.get_postings(term)
            if postings is None:
                if conjunctive:
                    raise NoResultsAvailable(f"No postings for '{term}'")
                continue
            found += 1
            ids = postings.doc_ids
            scores[ids] += model.score(
                tf=postings.frequencies,
                doc_length=index.doc_lengths[ids],
                document_frequency=postings.document_frequency,
                term_frequency=postings.term_frequency,
                key_frequency=key_frequency,
                statistics=stats,
            )
            hits[ids] += 1

        if not found:
            raise NoResultsAvailable(f"No postings for query {ctx.query_id}")

        matched = np.flatnonzero(hits >= (found if conjunctive else 1))
        # descending score, ascending docid on ties
        ranked = matched[np.lexsort((matched, -scores[matched]))]
        if self._retrieved_set_size > 0:
            ranked = ranked[: self._retrieved_set_size]

        ctx.result_set = RankedResultSet(
            doc_ids=ranked.tolist(),
            scores=scores[ranked].tolist(),
            exact_size=int(matched.size),
        )
        logger.debug(
            "Query %s matched %d documents, kept %d",
            ctx.query_id, matched.size, ranked.size,
        )

    def run_postprocessing(self, ctx: QueryContext) -> None:
        """Apply the optional ``start``/``end`` rank window (inclusive)."""
        rs = ctx.result_set
        start = ctx.controls.get("start")
        end = ctx.controls.get("end")
        if rs is None or (start is None and end is None):
            return
        try:
            lo = int(start) if start is not None else 0
            hi = int(end) + 1 if end is not None else rs.size
        except ValueError as exc:
            raise PipelineError(f"Invalid start/end controls: {start!r}, {end!r}") from exc
        ctx.result_set = rs.crop(lo, hi)

    def run_postfilters(self, ctx: QueryContext) -> None:
        """Embed configured metadata keys into the result set."""
        rs = ctx.result_set
        if rs is None:
            return
        for key in self._embedded_meta_keys:
            rs.embedded_metadata[key] = self.get_metadata(key, rs.doc_ids)

    # ------------------------------------------------------------------
    # Index access
    # ------------------------------------------------------------------

    def get_metadata(self, key: str, doc_ids: list[int]) -> list[str]:
        index = self._require_index()
        try:
            return index.get_items(key, doc_ids)
        except KeyError:
            raise PipelineError(
                f"Unknown metadata key '{key}'. Available: {index.meta_keys()}"
            ) from None

    def count_documents(self) -> int:
        return read_statistics(self._index_path).number_of_documents

    @property
    def retrieved_set_size(self) -> int:
        return self._retrieved_set_size

    @retrieved_set_size.setter
    def retrieved_set_size(self, value: int) -> None:
        self._retrieved_set_size = value

    def close(self) -> None:
        if self._index is None:
            raise IndexCloseError(f"Index {self._index_path} is already closed")
        self._index.close()
        self._index = None

    def _require_index(self) -> InvertedIndex:
        if self._index is None:
            raise PipelineError(f"Index {self._index_path} is closed")
        return self._index
