"""Shared fixtures: synthetic corpus and a scripted engine."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from iquery.engine.base import QueryEngine
from iquery.engine.schemas import QueryContext, RankedResultSet
from iquery.errors import IndexCloseError

# ---------------------------------------------------------------------------
# Corpus fixtures
# ---------------------------------------------------------------------------

CORPUS = [
    {"docno": "D0", "title": "Engines", "text": "search engines rank documents"},
    {"docno": "D1", "text": "information retrieval and search"},
    {"docno": "D2", "title": "Pasta", "text": "cooking pasta recipes"},
    {"docno": "D3", "title": "Models", "text": "retrieval models score documents for search engines"},
]


@pytest.fixture
def corpus_docs() -> list[dict[str, str]]:
    return [dict(d) for d in CORPUS]


@pytest.fixture
def corpus_file(tmp_path: Path, corpus_docs: list[dict[str, str]]) -> Path:
    p = tmp_path / "corpus.jsonl"
    p.write_text("\n".join(json.dumps(d) for d in corpus_docs) + "\n", encoding="utf-8")
    return p


# ---------------------------------------------------------------------------
# Scripted engine
# ---------------------------------------------------------------------------


class FakeEngine(QueryEngine):
    """Engine returning a preset result set (or raising a preset error)."""

    def __init__(
        self,
        result_set: RankedResultSet | None = None,
        error: Exception | None = None,
        meta: dict[str, dict[int, str]] | None = None,
        num_docs: int = 10,
    ):
        self.result_set = result_set
        self.error = error
        self.meta = meta or {}
        self.num_docs = num_docs
        self.stages: list[str] = []
        self.contexts: list[QueryContext] = []
        self.metadata_calls: list[tuple[str, list[int]]] = []
        self.sizes_seen: list[int] = []
        self.closed = False
        self._size = 1000

    def run_preprocessing(self, ctx: QueryContext) -> None:
        self.contexts.append(ctx)
        self.stages.append("preprocessing")

    def run_matching(self, ctx: QueryContext) -> None:
        self.stages.append("matching")
        self.sizes_seen.append(self._size)
        if self.error is not None:
            raise self.error
        ctx.result_set = self.result_set

    def run_postprocessing(self, ctx: QueryContext) -> None:
        self.stages.append("postprocessing")

    def run_postfilters(self, ctx: QueryContext) -> None:
        self.stages.append("postfilters")

    def get_metadata(self, key: str, doc_ids: list[int]) -> list[str]:
        self.metadata_calls.append((key, list(doc_ids)))
        return [self.meta[key][d] for d in doc_ids]

    def count_documents(self) -> int:
        return self.num_docs

    @property
    def retrieved_set_size(self) -> int:
        return self._size

    @retrieved_set_size.setter
    def retrieved_set_size(self, value: int) -> None:
        self._size = value

    def close(self) -> None:
        if self.closed:
            raise IndexCloseError("already closed")
        self.closed = True


@pytest.fixture
def sample_result_set() -> RankedResultSet:
    return RankedResultSet(
        doc_ids=[10, 20, 30],
        scores=[0.0, 5.2, 3.1],
        embedded_metadata={"docno": ["d10", "d20", "d30"]},
        exact_size=3,
    )
